"""Common shiftlog-specific exceptions."""


class ShiftLogValueError(ValueError):
    """Raised when shiftlog detects invalid user-provided data."""


class StorageError(RuntimeError):
    """Raised by a key-value store when the backing medium cannot be read or written."""


__all__ = ["ShiftLogValueError", "StorageError"]
