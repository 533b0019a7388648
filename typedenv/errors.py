"""Errors raised when an environment variable cannot be set."""


class EnvValidationError(ValueError):
    """Raised when a key or value is rejected before it reaches the store."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"{reason}: {key!r}")


class InvalidKeyError(EnvValidationError):
    """Raised when a key is empty or contains a double quote."""

    pass


class InvalidValueError(EnvValidationError):
    """Raised when a (formatted) value contains a double quote."""

    pass
