"""Host-side driver for wireless sensor nodes behind a base station."""

__version__ = "0.1.0"
