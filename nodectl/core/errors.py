"""Domain-specific errors for nodectl."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nodectl.core.model import ConfigIssue


class NodectlError(Exception):
    """Base error for nodectl."""


class ProfileValidationError(NodectlError):
    """Raised when a feature profile does not conform to schema or semantics."""


class ProfileLoadError(NodectlError):
    """Raised when loading feature profile sources fails."""


class CommunicationError(NodectlError):
    """Raised by the base station link when a request gets no valid answer."""


class CommunicationTimeoutError(CommunicationError):
    """Raised when the base station link times out waiting for a node."""


class UnexpectedValueError(NodectlError):
    """Raised when a register holds a value that cannot be decoded."""


class NotSupportedError(NodectlError):
    """Raised when a node's model or firmware lacks a feature."""

    def __init__(self, feature: str, message: str | None = None) -> None:
        self.feature = feature
        super().__init__(message or f"{feature} is not supported by this Node.")


class InvalidConfigError(NodectlError):
    """Raised when a node's configuration does not allow an operation."""

    def __init__(self, issues: Iterable[ConfigIssue], node_address: int | None = None) -> None:
        self.issues = tuple(issues)
        self.node_address = node_address
        details = "; ".join(issue.description for issue in self.issues)
        where = f" for node {node_address}" if node_address is not None else ""
        super().__init__(f"Invalid configuration{where}: {details}")


class NodeCommunicationError(NodectlError):
    """Raised when a node answers a command with a definite failure."""

    def __init__(self, node_address: int, message: str) -> None:
        self.node_address = node_address
        super().__init__(f"Node {node_address}: {message}")


class ProfileResolutionError(NodectlError):
    """Raised when a model, firmware, or setting cannot be resolved against profiles."""
