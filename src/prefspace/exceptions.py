"""Custom exceptions for the prefspace package."""

from __future__ import annotations


class PrefspaceError(Exception):
    """Base exception for all prefspace errors."""


class ConfigurationError(PrefspaceError):
    """Raised when a key group or store is misconfigured.

    Fatal for the affected key group: there is no fallback store for a
    store name that cannot be opened.
    """

    def __init__(self, subject: str, message: str) -> None:
        self.subject = subject
        super().__init__(f"'{subject}' misconfigured: {message}")


class SerializationError(PrefspaceError):
    """Raised by the explicit encode path when a value cannot be serialized."""

    def __init__(self, key: str, detail: str = "") -> None:
        self.key = key
        msg = f"Cannot serialize value for '{key}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class DeserializationError(PrefspaceError):
    """Raised by the explicit decode path when a stored blob cannot be decoded."""

    def __init__(self, key: str, detail: str = "") -> None:
        self.key = key
        msg = f"Cannot deserialize value for '{key}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class StoreError(PrefspaceError):
    """Raised when a store operation fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
