"""CRC-16/CCITT-FALSE checksum used by the QRIS tag 63 field."""

from typing import Union

POLYNOMIAL = 0x1021
INITIAL = 0xFFFF


def crc16ccitt(data: Union[str, bytes]) -> int:
    """Calculate CRC-16-CCITT checksum.

    ``str`` input is hashed as UTF-8; for the ASCII-only payloads the TLV
    model accepts this is one byte per character.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    crc = INITIAL
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ POLYNOMIAL) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc & 0xFFFF


def checksum(data: Union[str, bytes]) -> str:
    """Return the checksum as 4 uppercase hex digits."""
    return format(crc16ccitt(data), '04X')


def verify(payload: str) -> bool:
    """Check that the last 4 characters are the checksum of everything before them."""
    if not payload or len(payload) < 4:
        return False
    return payload[-4:].upper() == checksum(payload[:-4])
