from __future__ import annotations

from typing import Any, Dict, Mapping


class TradeflowError(Exception):
    """Base exception for Tradeflow."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class RegistryError(TradeflowError, ValueError):
    """Raised when a step registry cannot be built from its definitions."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TradeflowError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class DuplicateStepError(RegistryError):
    """Raised when two steps share an identifier."""


class CyclicDependencyError(RegistryError):
    """Raised when the prerequisite graph contains a cycle."""


class UnknownDependencyError(RegistryError):
    """Raised in strict mode when a step depends on an unregistered step."""


class ConfigError(TradeflowError, ValueError):
    """Raised when configuration cannot be loaded or interpreted."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TradeflowError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ConfigValidationError(ConfigError):
    """Raised when merged configuration fails schema validation."""


__all__ = [
    "TradeflowError",
    "RegistryError",
    "DuplicateStepError",
    "CyclicDependencyError",
    "UnknownDependencyError",
    "ConfigError",
    "ConfigValidationError",
]
