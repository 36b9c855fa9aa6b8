"""
Pytest configuration and fixtures.
"""
import pytest

from qris_service.cache import ArtifactCache
from qris_service.rewriter import AmountMode, PayloadRewriter
from qris_service.service import QrisService
from qris_service.tlv import Field, serialize

MERCHANT_ACCOUNT = "0016ID.CO.QRIS.WWW0118936009140000000010215ID1020000001230303UMI"


def build_payload(*pairs):
    return serialize(Field(tag, value) for tag, value in pairs)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class StubRenderer:
    def __init__(self):
        self.rendered = []

    def render(self, payload):
        self.rendered.append(payload)
        return b"\x89PNG-stub:" + payload.encode("ascii")


@pytest.fixture
def static_payload():
    """Static merchant code: no amount field, point of initiation 11."""
    return build_payload(
        ("00", "01"),
        ("01", "11"),
        ("26", MERCHANT_ACCOUNT),
        ("52", "5812"),
        ("53", "360"),
        ("58", "ID"),
        ("59", "TOKO CONTOH"),
        ("60", "JAKARTA"),
        ("61", "12345"),
        ("63", "ABCD"),
    )


@pytest.fixture
def strict_payload():
    return build_payload(
        ("00", "01"),
        ("01", "12"),
        ("26", MERCHANT_ACCOUNT),
        ("52", "5812"),
        ("53", "360"),
        ("54", "10"),
        ("58", "ID"),
        ("59", "TOKO CONTOH"),
        ("60", "JAKARTA"),
        ("63", "0000"),
    )


@pytest.fixture
def legacy_payload():
    return build_payload(
        ("00", "01"),
        ("01", "12"),
        ("26", MERCHANT_ACCOUNT),
        ("52", "5812"),
        ("54", "0000000010000"),
        ("53", "360"),
        ("58", "ID"),
        ("59", "TOKO CONTOH"),
        ("63", "1A2B"),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ArtifactCache(ttl=300, sweep_interval=60, clock=clock)


@pytest.fixture
def renderer():
    return StubRenderer()


@pytest.fixture
def service(cache, renderer):
    return QrisService(PayloadRewriter(AmountMode.STATIC), renderer, cache)
