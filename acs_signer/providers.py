"""
Clock and nonce capabilities used by the signer.

The signer never reads the wall clock or the random generator directly; it
is handed a clock and a nonce provider. Tests pass the fixed variants to
reproduce documented signatures byte for byte.
"""

import datetime
import secrets
import uuid
from typing import Protocol, Union

from .constants import TIMESTAMP_FORMAT


class Clock(Protocol):
    def now(self) -> datetime.datetime:
        ...


class NonceProvider(Protocol):
    def nonce(self) -> str:
        ...


def format_timestamp(moment: datetime.datetime) -> str:
    """
    Format an instant as ``YYYY-MM-DDTHH:MM:SSZ``.

    Naive datetimes are taken to be UTC already; aware ones are converted.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(datetime.timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime.datetime:
    """Parse a ``YYYY-MM-DDTHH:MM:SSZ`` string into an aware UTC datetime."""
    parsed = datetime.datetime.strptime(value, TIMESTAMP_FORMAT)
    return parsed.replace(tzinfo=datetime.timezone.utc)


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime.datetime:
        return datetime.datetime.now(datetime.timezone.utc)


class FixedClock:
    """Clock frozen at a single instant."""

    def __init__(self, moment: Union[datetime.datetime, str]):
        if isinstance(moment, str):
            moment = parse_timestamp(moment)
        self.moment = moment

    def now(self) -> datetime.datetime:
        return self.moment


class HexNonceProvider:
    """16 random bytes from the OS CSPRNG as 32 lowercase hex characters."""

    def nonce(self) -> str:
        return secrets.token_hex(16)


class UuidNonceProvider:
    """Random UUID v4 string."""

    def nonce(self) -> str:
        return str(uuid.uuid4())


class FixedNonceProvider:
    """Always returns the same nonce. Only for reproducing known vectors."""

    def __init__(self, value: str):
        self.value = value

    def nonce(self) -> str:
        return self.value


def nonce_provider_for(style: str) -> NonceProvider:
    """Build the nonce provider for a configured style ('hex' or 'uuid')."""
    if style == 'hex':
        return HexNonceProvider()
    if style == 'uuid':
        return UuidNonceProvider()
    raise ValueError(f"Unknown nonce style: {style}")
