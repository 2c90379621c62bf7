"""Local 4-digit PIN gate, checked once at startup."""

import json

import config


class PinLock:
    """Stores an optional PIN and tracks whether the app is locked."""

    PIN_LENGTH = 4

    def __init__(self, storage, key: str | None = None):
        """Load the stored PIN; the app starts locked if one is set.

        Args:
            storage: Object with get(key), set(key, value) and remove(key).
            key: Storage key for the PIN. Defaults to config.PIN_KEY.
        """
        self.storage = storage
        self.key = key or config.PIN_KEY
        self.pin = self._read(self.storage.get(self.key))
        self.locked = self.pin is not None

    def _read(self, raw: str | None) -> str | None:
        """Decode the stored document: a JSON string, or a bare PIN."""
        if not raw:
            return None
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            value = raw
        if not isinstance(value, str):
            value = raw.strip()
        return value or None

    @classmethod
    def is_valid_pin(cls, pin: str) -> bool:
        return (
            isinstance(pin, str)
            and len(pin) == cls.PIN_LENGTH
            and pin.isascii()
            and pin.isdigit()
        )

    def set_pin(self, pin: str) -> None:
        """Store a new PIN. Does not lock the current session.

        Raises:
            ValueError: If pin is not exactly 4 digits.
        """
        if not self.is_valid_pin(pin):
            raise ValueError("PIN must be exactly 4 digits")
        self.storage.set(self.key, json.dumps(pin))
        self.pin = pin

    def clear(self) -> None:
        """Remove the PIN and unlock."""
        self.storage.remove(self.key)
        self.pin = None
        self.locked = False

    def unlock(self, attempt: str) -> bool:
        """Try a PIN. A wrong attempt leaves the lock unchanged."""
        if not self.locked:
            return True
        if attempt == self.pin:
            self.locked = False
            return True
        return False
