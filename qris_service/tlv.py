"""
EMV-style TLV payload model.

Every field is ``tag (2 digits) + length (2 digits) + value``. Mutations
parse the whole payload into fields and serialize it back, so offsets of
later fields are always recomputed instead of patched.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, NamedTuple

from .errors import MalformedPayload, ValueTooLong

MAX_VALUE_LENGTH = 99
HEADER_LENGTH = 4

_TWO_DIGITS = re.compile(r"[0-9]{2}")


@dataclass(frozen=True)
class Field:
    tag: str
    value: str

    def serialize(self) -> str:
        return f"{self.tag}{encode_length(self.value)}{self.value}"


class FieldLocation(NamedTuple):
    start: int
    length: int
    value_start: int


def encode_length(value: str) -> str:
    if len(value) > MAX_VALUE_LENGTH:
        raise ValueTooLong(f"Value of {len(value)} characters does not fit a two-digit length header")
    return str(len(value)).zfill(2)


def _walk(payload: str) -> Iterator[tuple]:
    """Yield ``(tag, FieldLocation)`` for each field, validating as it goes."""
    if not payload.isascii():
        raise MalformedPayload("Payload must contain ASCII characters only")
    idx = 0
    total = len(payload)
    while idx < total:
        if total - idx < HEADER_LENGTH:
            raise MalformedPayload(f"Dangling data at offset {idx}")
        tag = payload[idx:idx + 2]
        header = payload[idx + 2:idx + HEADER_LENGTH]
        if not _TWO_DIGITS.fullmatch(tag):
            raise MalformedPayload(f"Invalid tag {tag!r} at offset {idx}")
        if not _TWO_DIGITS.fullmatch(header):
            raise MalformedPayload(f"Invalid length header {header!r} for tag {tag}")
        length = int(header)
        value_start = idx + HEADER_LENGTH
        if value_start + length > total:
            raise MalformedPayload(f"Tag {tag} length {length} runs past end of payload")
        yield tag, FieldLocation(idx, length, value_start)
        idx = value_start + length


def parse(payload: str) -> List[Field]:
    """Parse a payload string into its fields."""
    return [
        Field(tag, payload[loc.value_start:loc.value_start + loc.length])
        for tag, loc in _walk(payload)
    ]


def serialize(fields) -> str:
    return "".join(field.serialize() for field in fields)


def find_field(payload: str, tag: str) -> FieldLocation:
    """Locate the first field with ``tag``; raises MalformedPayload if absent."""
    for found, location in _walk(payload):
        if found == tag:
            return location
    raise MalformedPayload(f"Tag {tag} not found in payload")


def get_value(payload: str, tag: str) -> str:
    location = find_field(payload, tag)
    return payload[location.value_start:location.value_start + location.length]


def replace_field(payload: str, tag: str, new_value: str) -> str:
    """Replace the value of ``tag`` and return the whole re-serialized payload."""
    encode_length(new_value)
    fields = parse(payload)
    for i, field in enumerate(fields):
        if field.tag == tag:
            fields[i] = Field(tag, new_value)
            return serialize(fields)
    raise MalformedPayload(f"Tag {tag} not found in payload")


def insert_field(payload: str, tag: str, value: str) -> str:
    """Insert a new field before the first field with a higher tag."""
    encode_length(value)
    fields = parse(payload)
    if any(field.tag == tag for field in fields):
        raise MalformedPayload(f"Tag {tag} already present in payload")
    position = next((i for i, field in enumerate(fields) if field.tag > tag), len(fields))
    fields.insert(position, Field(tag, value))
    return serialize(fields)


def truncate_at(payload: str, tag: str) -> str:
    """Return everything up to and including the tag + length header of ``tag``."""
    location = find_field(payload, tag)
    return payload[:location.value_start]
