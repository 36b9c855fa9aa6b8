"""
Payload rewriter: turns a merchant QRIS payload plus an amount into a
dynamic payload with a fresh CRC.
"""

import decimal
import enum
from decimal import Decimal

from . import tlv
from .crc import checksum
from .errors import InvalidAmount, MalformedPayload, MissingInput

AMOUNT_TAG = "54"
CHECKSUM_TAG = "63"
CHECKSUM_LENGTH = 4
POINT_OF_INITIATION_TAG = "01"
STATIC_INITIATION = "11"
DYNAMIC_INITIATION = "12"
LEGACY_AMOUNT_WIDTH = 13
# integer digits + "." + 2 fraction digits must fit the 99-character value budget
MAX_AMOUNT_DIGITS = tlv.MAX_VALUE_LENGTH - 3
CENTS = Decimal("0.01")


def _amount_context() -> decimal.Context:
    return decimal.Context(prec=tlv.MAX_VALUE_LENGTH + 2, traps=[decimal.InvalidOperation, decimal.Overflow])


class AmountMode(str, enum.Enum):
    LEGACY = "legacy"  # fixed 13-digit, zero padded
    STRICT = "strict"  # length-prefixed decimal
    STATIC = "static"  # static code -> dynamic, amount inserted if missing


def parse_amount(amount) -> Decimal:
    """Parse a positive amount with at most two fraction digits."""
    if amount is None or isinstance(amount, bool):
        raise InvalidAmount()
    try:
        value = Decimal(str(amount).strip())
    except decimal.DecimalException:
        raise InvalidAmount(f"Amount {amount!r} is not a number")
    if not value.is_finite() or value <= 0:
        raise InvalidAmount(f"Amount {amount!r} must be a positive number")
    if value.adjusted() >= MAX_AMOUNT_DIGITS:
        raise InvalidAmount(f"Amount {amount!r} has more than {MAX_AMOUNT_DIGITS} digits")
    # tiny values quantize to zero and are caught here too
    if value.adjusted() < -2 or value.quantize(CENTS, context=_amount_context()) != value:
        raise InvalidAmount(f"Amount {amount!r} has more than two fraction digits")
    return value


def encode_amount(amount: Decimal, mode: AmountMode) -> str:
    whole = amount == amount.to_integral_value(context=_amount_context())
    if mode is AmountMode.LEGACY:
        if not whole:
            raise InvalidAmount("Fixed-width amounts must be whole numbers")
        if amount.adjusted() >= LEGACY_AMOUNT_WIDTH:
            raise InvalidAmount(f"Amount does not fit in {LEGACY_AMOUNT_WIDTH} digits")
        return str(int(amount)).zfill(LEGACY_AMOUNT_WIDTH)
    if whole:
        return str(int(amount))
    return format(amount.quantize(CENTS, context=_amount_context()), "f")


class PayloadRewriter:
    """Rewrites the amount field of a payload in one configured mode."""

    def __init__(self, mode: AmountMode = AmountMode.STRICT):
        self.mode = AmountMode(mode)

    def rewrite(self, raw_payload: str, amount) -> str:
        if not raw_payload or not raw_payload.strip():
            raise MissingInput("QRIS payload is required")
        value = parse_amount(amount)
        encoded = encode_amount(value, self.mode)
        payload = raw_payload.strip()

        if self.mode is AmountMode.LEGACY:
            location = tlv.find_field(payload, AMOUNT_TAG)
            if location.length != LEGACY_AMOUNT_WIDTH:
                raise MalformedPayload(
                    f"Amount field has length {location.length}, expected {LEGACY_AMOUNT_WIDTH}"
                )
            payload = tlv.replace_field(payload, AMOUNT_TAG, encoded)
        elif self.mode is AmountMode.STATIC:
            payload = self._make_dynamic(payload)
            if any(field.tag == AMOUNT_TAG for field in tlv.parse(payload)):
                payload = tlv.replace_field(payload, AMOUNT_TAG, encoded)
            else:
                payload = tlv.insert_field(payload, AMOUNT_TAG, encoded)
        else:
            payload = tlv.replace_field(payload, AMOUNT_TAG, encoded)

        unsigned = self._strip_checksum(payload)
        return unsigned + checksum(unsigned)

    @staticmethod
    def _make_dynamic(payload: str) -> str:
        initiation = {field.tag: field.value for field in tlv.parse(payload)}.get(POINT_OF_INITIATION_TAG)
        if initiation == STATIC_INITIATION:
            return tlv.replace_field(payload, POINT_OF_INITIATION_TAG, DYNAMIC_INITIATION)
        return payload

    @staticmethod
    def _strip_checksum(payload: str) -> str:
        location = tlv.find_field(payload, CHECKSUM_TAG)
        if location.length != CHECKSUM_LENGTH:
            raise MalformedPayload(f"Checksum field has length {location.length}, expected 4")
        if location.value_start + location.length != len(payload):
            raise MalformedPayload("Checksum field must be the last field")
        return tlv.truncate_at(payload, CHECKSUM_TAG)


def rewrite(raw_payload: str, amount, mode: AmountMode = AmountMode.STRICT) -> str:
    return PayloadRewriter(mode).rewrite(raw_payload, amount)
