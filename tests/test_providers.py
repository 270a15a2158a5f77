"""
Unit tests for clock and nonce providers.
"""

import datetime
import uuid

import pytest
from freezegun import freeze_time

from acs_signer import (
    FixedClock,
    FixedNonceProvider,
    HexNonceProvider,
    SystemClock,
    UuidNonceProvider,
)
from acs_signer.providers import format_timestamp, nonce_provider_for, parse_timestamp

FIXED_TIME = '2023-12-15 12:00:00'


class TestClocks:
    """Test clock implementations and timestamp formatting."""

    @freeze_time(FIXED_TIME)
    def test_system_clock_utc(self):
        """Test that the system clock reads UTC."""
        now = SystemClock().now()

        assert now.tzinfo is not None
        assert format_timestamp(now) == "2023-12-15T12:00:00Z"

    def test_fixed_clock_from_string(self):
        """Test a fixed clock built from the wire format."""
        clock = FixedClock("2023-10-26T10:22:32Z")

        assert clock.now() == datetime.datetime(2023, 10, 26, 10, 22, 32, tzinfo=datetime.timezone.utc)
        assert format_timestamp(clock.now()) == "2023-10-26T10:22:32Z"

    def test_fixed_clock_from_datetime(self):
        """Test a fixed clock built from a datetime."""
        moment = datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)
        assert FixedClock(moment).now() is moment

    def test_format_converts_offset_to_utc(self):
        """Test that local offsets are converted, never emitted."""
        offset = datetime.timezone(datetime.timedelta(hours=8))
        moment = datetime.datetime(2023, 10, 26, 18, 22, 32, tzinfo=offset)

        assert format_timestamp(moment) == "2023-10-26T10:22:32Z"

    def test_format_drops_microseconds(self):
        """Test second precision."""
        moment = datetime.datetime(2023, 10, 26, 10, 22, 32, 999999, tzinfo=datetime.timezone.utc)
        assert format_timestamp(moment) == "2023-10-26T10:22:32Z"

    def test_format_naive_is_utc(self):
        """Test that naive datetimes are treated as UTC."""
        assert format_timestamp(datetime.datetime(2023, 10, 26, 10, 22, 32)) == "2023-10-26T10:22:32Z"

    def test_parse_invalid(self):
        """Test that a malformed timestamp does not parse."""
        with pytest.raises(ValueError):
            parse_timestamp("2023-10-26 10:22:32")


class TestNonceProviders:
    """Test nonce provider implementations."""

    def test_hex_nonce(self):
        """Test hex nonce format."""
        nonce = HexNonceProvider().nonce()

        assert len(nonce) == 32
        assert nonce == nonce.lower()
        int(nonce, 16)

    def test_uuid_nonce(self):
        """Test UUID v4 nonce format."""
        nonce = UuidNonceProvider().nonce()

        assert len(nonce) == 36
        assert uuid.UUID(nonce).version == 4

    @pytest.mark.parametrize("provider", [HexNonceProvider(), UuidNonceProvider()])
    def test_unique_nonces(self, provider):
        """Test that random providers never repeat over many draws."""
        nonces = {provider.nonce() for _ in range(1000)}
        assert len(nonces) == 1000

    def test_fixed_nonce(self):
        """Test fixed nonce provider."""
        provider = FixedNonceProvider("3156853299f313e23d1673dc12e1703d")
        assert provider.nonce() == provider.nonce() == "3156853299f313e23d1673dc12e1703d"

    def test_nonce_provider_for(self):
        """Test provider selection by style."""
        assert isinstance(nonce_provider_for('hex'), HexNonceProvider)
        assert isinstance(nonce_provider_for('uuid'), UuidNonceProvider)

        with pytest.raises(ValueError):
            nonce_provider_for('counter')
