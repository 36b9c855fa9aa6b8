"""
QRIS Microservice - dynamic QRIS generation
"""

from .crc import checksum, verify
from .errors import (
    InvalidAmount,
    MalformedPayload,
    MissingInput,
    NotFoundOrExpired,
    QrisError,
    RenderError,
    ValueTooLong,
)
from .rewriter import AmountMode, PayloadRewriter, rewrite

__version__ = "1.1.0"

__all__ = [
    "AmountMode",
    "InvalidAmount",
    "MalformedPayload",
    "MissingInput",
    "NotFoundOrExpired",
    "PayloadRewriter",
    "QrisError",
    "RenderError",
    "ValueTooLong",
    "checksum",
    "rewrite",
    "verify",
]
