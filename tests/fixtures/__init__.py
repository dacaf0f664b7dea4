"""Test fixtures and fakes."""

from tests.fixtures.fake_monasca import (
    KEYSTONE_URL,
    MONASCA_URL,
    TEST_PASSWORD,
    TEST_TOKEN,
    FakeMonasca,
)

__all__ = [
    "KEYSTONE_URL",
    "MONASCA_URL",
    "TEST_PASSWORD",
    "TEST_TOKEN",
    "FakeMonasca",
]
