"""Named register locations shared by every node model.

Per-channel locations (gain, offset, calibration, ...) are only reachable
through a feature profile's channel groups, which refer to them by name.
"""

from __future__ import annotations

from nodectl.core.model import EepromLocation, ValueType

_F = ValueType.FLOAT

NODE_ADDRESS = EepromLocation("NODE_ADDRESS", 12)
FREQUENCY = EepromLocation("FREQUENCY", 14)
ACTIVE_CHANNEL_MASK = EepromLocation("ACTIVE_CHANNEL_MASK", 16)
SAMPLING_MODE = EepromLocation("SAMPLING_MODE", 18)
SAMPLE_RATE = EepromLocation("SAMPLE_RATE", 20)
DATALOG_SAMPLE_RATE = EepromLocation("DATALOG_SAMPLE_RATE", 22)
NUM_SWEEPS = EepromLocation("NUM_SWEEPS", 24)
UNLIMITED_SAMPLING = EepromLocation("UNLIMITED_SAMPLING", 26)
UNLIMITED_DATALOG = EepromLocation("UNLIMITED_DATALOG", 28)
DATA_FORMAT = EepromLocation("DATA_FORMAT", 30)
COLLECTION_MODE = EepromLocation("COLLECTION_MODE", 32)
TIME_BETWEEN_BURSTS = EepromLocation("TIME_BETWEEN_BURSTS", 34)
LOST_BEACON_TIMEOUT = EepromLocation("LOST_BEACON_TIMEOUT", 36)
DEFAULT_MODE = EepromLocation("DEFAULT_MODE", 38)
INACTIVITY_TIMEOUT = EepromLocation("INACTIVITY_TIMEOUT", 40)
CHECK_RADIO_INTERVAL = EepromLocation("CHECK_RADIO_INTERVAL", 42)
TRANSMIT_POWER = EepromLocation("TRANSMIT_POWER", 44)
NUM_DATALOG_SESSIONS = EepromLocation("NUM_DATALOG_SESSIONS", 46)

FIRMWARE_VER = EepromLocation("FIRMWARE_VER", 108)
MODEL_NUMBER = EepromLocation("MODEL_NUMBER", 112)
MODEL_OPTION = EepromLocation("MODEL_OPTION", 114)
SERIAL_ID = EepromLocation("SERIAL_ID", 116)
MICROCONTROLLER = EepromLocation("MICROCONTROLLER", 118)
RADIO_OPTIONS = EepromLocation("RADIO_OPTIONS", 120)
MAX_MEMORY = EepromLocation("MAX_MEMORY", 122)
REGION_CODE = EepromLocation("REGION_CODE", 124)

CYCLE_POWER = EepromLocation("CYCLE_POWER", 250)

HW_GAIN_1 = EepromLocation("HW_GAIN_1", 130)
HW_GAIN_2 = EepromLocation("HW_GAIN_2", 132)
HW_GAIN_3 = EepromLocation("HW_GAIN_3", 134)
HW_GAIN_4 = EepromLocation("HW_GAIN_4", 136)
HW_OFFSET_1 = EepromLocation("HW_OFFSET_1", 140)
HW_OFFSET_2 = EepromLocation("HW_OFFSET_2", 142)
HW_OFFSET_3 = EepromLocation("HW_OFFSET_3", 144)
HW_OFFSET_4 = EepromLocation("HW_OFFSET_4", 146)
CH_ACTION_ID_1 = EepromLocation("CH_ACTION_ID_1", 150)
CH_ACTION_ID_2 = EepromLocation("CH_ACTION_ID_2", 152)
CH_ACTION_ID_3 = EepromLocation("CH_ACTION_ID_3", 154)
CH_ACTION_ID_4 = EepromLocation("CH_ACTION_ID_4", 156)
CH_ACTION_SLOPE_1 = EepromLocation("CH_ACTION_SLOPE_1", 160, _F)
CH_ACTION_SLOPE_2 = EepromLocation("CH_ACTION_SLOPE_2", 168, _F)
CH_ACTION_SLOPE_3 = EepromLocation("CH_ACTION_SLOPE_3", 176, _F)
CH_ACTION_SLOPE_4 = EepromLocation("CH_ACTION_SLOPE_4", 184, _F)
CH_ACTION_OFFSET_1 = EepromLocation("CH_ACTION_OFFSET_1", 164, _F)
CH_ACTION_OFFSET_2 = EepromLocation("CH_ACTION_OFFSET_2", 172, _F)
CH_ACTION_OFFSET_3 = EepromLocation("CH_ACTION_OFFSET_3", 180, _F)
CH_ACTION_OFFSET_4 = EepromLocation("CH_ACTION_OFFSET_4", 188, _F)
FILTER_1 = EepromLocation("FILTER_1", 200)
FILTER_2 = EepromLocation("FILTER_2", 202)
THERMOCPL_TYPE = EepromLocation("THERMOCPL_TYPE", 204)

FATIGUE_YOUNGS_MODULUS = EepromLocation("FATIGUE_YOUNGS_MODULUS", 300, _F)
FATIGUE_POISSONS_RATIO = EepromLocation("FATIGUE_POISSONS_RATIO", 304, _F)
FATIGUE_PEAK_VALLEY_THRESHOLD = EepromLocation("FATIGUE_PEAK_VALLEY_THRESHOLD", 308)
FATIGUE_MODE = EepromLocation("FATIGUE_MODE", 310)
HISTOGRAM_RATE = EepromLocation("HISTOGRAM_RATE", 320)
BIN_START = EepromLocation("BIN_START", 322)
BIN_SIZE = EepromLocation("BIN_SIZE", 324)
RESET_BINS = EepromLocation("RESET_BINS", 326)

# Channel slopes and offsets are paired by the register holding the slope.
LINEAR_EQUATION_OFFSETS = {
    CH_ACTION_SLOPE_1.address: CH_ACTION_OFFSET_1,
    CH_ACTION_SLOPE_2.address: CH_ACTION_OFFSET_2,
    CH_ACTION_SLOPE_3.address: CH_ACTION_OFFSET_3,
    CH_ACTION_SLOPE_4.address: CH_ACTION_OFFSET_4,
}

LOCATIONS: dict[str, EepromLocation] = {
    name: value for name, value in dict(globals()).items() if isinstance(value, EepromLocation)
}


def by_address(address: int) -> EepromLocation:
    """Return the named location at *address*, or an anonymous 16-bit one."""
    for location in LOCATIONS.values():
        if location.address == address:
            return location
    return EepromLocation(f"EEPROM_{address}", address)
