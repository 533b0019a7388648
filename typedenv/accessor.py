"""Typed access to environment variables.

Reads parse the raw string into a typed value and never fail: a missing,
empty or malformed value yields the caller's fallback. Writes format the
typed value, validate key and value, and raise on rejection without
touching the store.

Floats are handled with IEEE-754 binary32 precision: parsed text is rounded
to the nearest 32-bit value, and written values are rounded to 32 bits
before formatting.
"""

from __future__ import annotations

import logging
import math
import numbers
import operator
import re
import struct
from decimal import Decimal, InvalidOperation, localcontext

from typedenv.errors import InvalidKeyError, InvalidValueError
from typedenv.runtime_env import EnvStore, ProcessEnvStore

logger = logging.getLogger(__name__)

DEFAULT_FLOAT_PRECISION = 2

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)

_FLOAT32_INF_BITS = 0x7F800000
_FLOAT32_LIMIT = Decimal(2**128)


def to_float32(value: float) -> float:
    """Round *value* to the nearest binary32 value.

    Raises:
        OverflowError: If a finite *value* is beyond the binary32 range.
    """
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _float32_bits(value: float) -> int:
    return struct.unpack("<I", struct.pack("<f", value))[0]


def _exact_float32(bits: int) -> Decimal:
    # The infinity pattern stands for 2**128, the first value past the range
    if bits == _FLOAT32_INF_BITS:
        return _FLOAT32_LIMIT
    return Decimal(struct.unpack("<f", struct.pack("<I", bits))[0])


def _round_to_float32(magnitude: Decimal) -> float | None:
    """Round a finite, non-negative decimal to binary32, ties to even.

    Returns None when the result does not fit in binary32.
    """
    # Going through float first can round twice; the candidate is at most
    # one step off and is corrected against the exact midpoints.
    try:
        bits = _float32_bits(float(magnitude))
    except OverflowError:
        bits = _FLOAT32_INF_BITS

    with localcontext() as ctx:
        ctx.prec = 400
        if bits < _FLOAT32_INF_BITS:
            upper = (_exact_float32(bits) + _exact_float32(bits + 1)) / 2
            if magnitude > upper or (magnitude == upper and bits % 2):
                bits += 1
        if bits > 0:
            lower = (_exact_float32(bits - 1) + _exact_float32(bits)) / 2
            if magnitude < lower or (magnitude == lower and bits % 2):
                bits -= 1

    if bits >= _FLOAT32_INF_BITS:
        return None
    return struct.unpack("<f", struct.pack("<I", bits))[0]


def _parse_float32(raw: str) -> float | None:
    if not _FLOAT_RE.fullmatch(raw):
        return None
    try:
        number = Decimal(raw)
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return float(number)

    value = _round_to_float32(abs(number))
    if value is None:
        return None
    return -value if number.is_signed() else value


def _format_float32(value: float, precision: int) -> str:
    try:
        v32 = to_float32(value)
    except OverflowError:
        v32 = math.copysign(math.inf, value)

    if precision >= 0:
        return f"{v32:.{precision}f}"
    if not math.isfinite(v32):
        return str(v32)

    # Shortest text that reads back as the same binary32 value.
    for digits in range(1, 10):
        text = f"{v32:.{digits}g}"
        if to_float32(float(text)) == v32:
            break
    return format(Decimal(text), "f")


class TypedEnvAccessor:
    """Typed get/set functions over an environment store.

    Holds no state besides the store; the process environment is used
    unless another store is injected.
    """

    def __init__(self, store: EnvStore | None = None) -> None:
        self.store: EnvStore = store if store is not None else ProcessEnvStore()

    def get_string(self, key: str, fallback: str) -> str:
        """Return the raw value of *key*, or *fallback* if it is not set.

        A key that is set to the empty string returns the empty string.
        """
        value = self.store.get(key)
        if value is None:
            return fallback
        return value

    def get_int(self, key: str, fallback: int) -> int:
        """Return *key* parsed as a base-10 integer, or *fallback*."""
        raw = self.get_string(key, "")
        if raw == "":
            return fallback
        if not _INT_RE.fullmatch(raw):
            logger.debug(f"Env {key} is not an integer, using fallback")
            return fallback
        try:
            return int(raw)
        except ValueError:
            # int() refuses overly long digit strings
            logger.debug(f"Env {key} could not be converted to int, using fallback")
            return fallback

    def get_bool(self, key: str, fallback: bool) -> bool:
        """Return *key* as a boolean, or *fallback*.

        Only "true" and "false" are recognised, in any letter case.
        """
        raw = self.get_string(key, "")
        if raw == "":
            return fallback

        lowered = raw.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False

        logger.debug(f"Env {key} is not a boolean, using fallback")
        return fallback

    def get_float32(self, key: str, fallback: float) -> float:
        """Return *key* parsed and rounded to a 32-bit float, or *fallback*.

        Long decimal expansions round to the nearest representable value.
        Text outside the 32-bit range falls back like any parse failure.
        """
        raw = self.get_string(key, "")
        if raw == "":
            return fallback

        value = _parse_float32(raw)
        if value is None:
            logger.debug(f"Env {key} is not a 32-bit float, using fallback")
            return fallback
        return value

    def set_string(self, key: str, value: str) -> None:
        """Set *key* to *value* verbatim.

        Raises:
            InvalidKeyError: If *key* contains a double quote or is empty.
            InvalidValueError: If *value* contains a double quote.
        """
        if '"' in key:
            raise InvalidKeyError(key, "environment key contains a double quote")
        if '"' in value:
            raise InvalidValueError(key, "environment value contains a double quote")
        if key == "":
            raise InvalidKeyError(key, "environment key is empty")

        self.store.set(key, value)
        logger.debug(f"Set env {key}")

    def set_int(self, key: str, value: int) -> None:
        """Set *key* to the base-10 text of *value*.

        Raises:
            InvalidValueError: If *value* is not an integer (floats are not
                truncated).
        """
        try:
            number = operator.index(value)
        except TypeError:
            raise InvalidValueError(key, "environment value is not an integer") from None
        self.set_string(key, str(number))

    def set_bool(self, key: str, value: bool) -> None:
        """Set *key* to "true" or "false"."""
        self.set_string(key, "true" if value else "false")

    def set_float32(
        self,
        key: str,
        value: float,
        precision: int = DEFAULT_FLOAT_PRECISION,
    ) -> None:
        """Set *key* to *value* rounded to 32 bits in fixed-point notation.

        Args:
            key: Environment variable name.
            value: Number to store; finite values beyond the 32-bit range
                are stored as infinity.
            precision: Digits after the decimal point. A negative precision
                writes the fewest digits that read back as the same 32-bit
                value.
        """
        if not isinstance(value, numbers.Real):
            raise InvalidValueError(key, "environment value is not a number")
        self.set_string(key, _format_float32(value, precision))
