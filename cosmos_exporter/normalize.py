"""Conversions from upstream numeric text to gauge values.

Cosmos SDK encodes ``math.Int`` fields as plain integer text and
``math.LegacyDec`` fields as the integer text of the value multiplied by
10^18 when they travel over gRPC. Zenrock's validation service sends every
numeric field as an ordinary decimal string instead.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

from .errors import MalformedUpstream

LEGACY_DEC_PRECISION = 18


def _to_text(raw: Union[str, bytes]) -> str:
    if isinstance(raw, bytes):
        try:
            return raw.decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedUpstream(f"non-ascii numeric field {raw!r}") from e
    return raw


def parse_decimal(raw: Union[str, bytes]) -> Decimal:
    text = _to_text(raw).strip()
    if not text:
        return Decimal(0)
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise MalformedUpstream(f"could not parse decimal {text!r}") from e
    if not value.is_finite():
        raise MalformedUpstream(f"non-finite decimal {text!r}")
    return value


def parse_int(raw: Union[str, bytes]) -> Decimal:
    value = parse_decimal(raw)
    if value != value.to_integral_value():
        raise MalformedUpstream(f"expected an integer, got {raw!r}")
    return value


def parse_legacy_dec(raw: Union[str, bytes]) -> Decimal:
    """Decode a LegacyDec as sent by the standard Cosmos gRPC services.

    The wire text has no decimal point; it is the fixed-point integer with
    18 fractional digits. Text that already contains a point is taken as is.
    """
    text = _to_text(raw).strip()
    value = parse_decimal(text)
    if "." in text or "e" in text.lower():
        return value
    sign, digits, exponent = value.as_tuple()
    return Decimal((sign, digits, exponent - LEGACY_DEC_PRECISION))


def to_float(value: Decimal) -> float:
    """Shortest-round-trip conversion; overflow yields +/-Inf."""
    if not isinstance(value, Decimal):
        value = parse_decimal(str(value))
    if not value.is_finite():
        raise MalformedUpstream(f"non-finite value {value}")
    return float(value)


def scale(value: Decimal, coefficient: float) -> float:
    return to_float(value) / coefficient


def sanitize_utf8(raw: Union[str, bytes]) -> str:
    """Keep only valid Unicode scalar values, dropping anything else."""
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="ignore")
    return raw.encode("utf-8", errors="ignore").decode("utf-8")
