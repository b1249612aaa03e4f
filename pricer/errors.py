from enum import Enum


class PricerError(Exception):
    """Base class for errors raised by the pricer package."""


class DecodeErrorKind(str, Enum):
    WRONG_LENGTH = "wrong_length"


class DecodeError(PricerError):
    def __init__(self, kind: DecodeErrorKind, expected: int, actual: int):
        self.kind = kind
        self.expected = expected
        self.actual = actual
        super().__init__(f"{kind.value}: expected {expected} bytes, got {actual}")


class StoreError(PricerError):
    """Persistence store could not be opened or its schema created."""


class ConfigError(PricerError):
    pass
