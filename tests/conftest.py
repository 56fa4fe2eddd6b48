"""
Shared fixtures for the launch alert pipeline tests.

External collaborators (RPC client, HTTP session, Telegram) are replaced
by test doubles; derivation and scoring run for real.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from solders.pubkey import Pubkey

from address_deriver import AddressDeriver
from alert_pipeline import AlertPipeline
from models import CreationEvent, LogNotification, MarketSnapshot
from payload_decoder import creation_log_lines
from reputation import ReputationChecker
from scoring import ConfidenceScorer

TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string("ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL")


def key(fill: int) -> Pubkey:
    return Pubkey.from_bytes(bytes([fill]) * 32)


def make_event(name="PepeCoin", symbol="PEPE2", uri="https://example.com/meta.json") -> CreationEvent:
    return CreationEvent(
        name=name,
        symbol=symbol,
        uri=uri,
        mint=key(1),
        bonding_curve=key(2),
        creator=key(3),
    )


def make_notification(event: CreationEvent, signature="5igSig", has_error=False) -> LogNotification:
    return LogNotification(logs=creation_log_lines(event), signature=signature, has_error=has_error)


class FakeResponse:
    def __init__(self, status=200, body=None, json_error=None):
        self.status = status
        self.body = body
        self.json_error = json_error

    async def json(self, content_type=None):
        if self.json_error:
            raise self.json_error
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Minimal stand-in for aiohttp.ClientSession.get()."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def balance_response(lamports: int):
    return MagicMock(value=lamports)


@pytest.fixture
def rpc_client():
    """AsyncClient double; creator holds 2 SOL by default."""
    client = MagicMock()
    client.get_balance = AsyncMock(return_value=balance_response(2_000_000_000))
    return client


@pytest.fixture
def reputation_checker(rpc_client):
    return ReputationChecker(rpc_client)


@pytest.fixture
def scorer(reputation_checker):
    return ConfidenceScorer(reputation_checker)


@pytest.fixture
def deriver():
    return AddressDeriver(TOKEN_PROGRAM_ID, ASSOCIATED_TOKEN_PROGRAM_ID)


@pytest.fixture
def enricher():
    enricher = MagicMock()
    enricher.fetch = AsyncMock(return_value=MarketSnapshot(price=0.000042, market_cap=42_000.0))
    return enricher


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.send_message = AsyncMock(return_value=None)
    return notifier


@pytest.fixture
def pipeline(deriver, enricher, scorer, notifier):
    return AlertPipeline(deriver=deriver, enricher=enricher, scorer=scorer, notifier=notifier)
