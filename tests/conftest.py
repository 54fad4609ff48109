"""Shared test fixtures for aumai-cryptostatus."""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable, Iterator
from datetime import UTC, datetime

import pytest
import structlog

from aumai_cryptostatus.core import CryptoStatusResolver, build_crypto_status
from aumai_cryptostatus.interactor import RecipientStatusMapper
from aumai_cryptostatus.models import (
    ComposeCryptoStatus,
    CryptoMode,
    CryptoProviderState,
    InboundMessage,
    ProviderRequest,
    ProviderResponse,
    Recipient,
    RecipientTrustStatus,
)

# ---------------------------------------------------------------------------
# Provider double
# ---------------------------------------------------------------------------


class FakeProvider:
    """Records requests and answers with a canned response."""

    def __init__(self, response: ProviderResponse) -> None:
        self.response = response
        self.requests: list[ProviderRequest] = []

    def execute(self, request: ProviderRequest) -> ProviderResponse:
        self.requests.append(request)
        return self.response


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo any setup_logging() call so handlers never outlive a test."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


# ---------------------------------------------------------------------------
# Stateless services
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def resolver() -> CryptoStatusResolver:
    """A shared resolver (stateless, safe to share)."""
    return CryptoStatusResolver()


@pytest.fixture(scope="session")
def mapper() -> RecipientStatusMapper:
    return RecipientStatusMapper()


@pytest.fixture()
def make_provider() -> Callable[..., FakeProvider]:
    """Factory: a provider double answering with a fixed response."""

    def _make(**response_fields: object) -> FakeProvider:
        return FakeProvider(ProviderResponse(**response_fields))  # type: ignore[arg-type]

    return _make


# ---------------------------------------------------------------------------
# Compose status fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_status() -> Callable[..., ComposeCryptoStatus]:
    """Factory: build a status, optionally with a trust status folded in."""

    def _make(
        provider_state: CryptoProviderState = CryptoProviderState.ok,
        mode: CryptoMode = CryptoMode.opportunistic,
        trust: RecipientTrustStatus | None = None,
        inline: bool = False,
        recipients: tuple[str, ...] = ("bob@example.com",),
    ) -> ComposeCryptoStatus:
        status = build_crypto_status(
            provider_state=provider_state,
            mode=mode,
            recipients=[Recipient(address=addr) for addr in recipients],
            pgp_inline_enabled=inline,
        )
        if trust is not None:
            status = status.with_recipient_trust_status(trust)
        return status

    return _make


# ---------------------------------------------------------------------------
# Inbound message fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def internal_date() -> datetime:
    return datetime(2020, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def make_message(internal_date: datetime) -> Callable[..., InboundMessage]:
    """Factory: an inbound message from alice with the given Autocrypt headers."""

    def _make(
        *autocrypt_values: str,
        from_address: str | None = "alice@example.com",
        sent_date: datetime | None = datetime(2020, 1, 2, 12, 0, tzinfo=UTC),
    ) -> InboundMessage:
        headers = [("Subject", "hello")]
        headers.extend(("Autocrypt", value) for value in autocrypt_values)
        return InboundMessage(
            from_addresses=(from_address,) if from_address else (),
            sent_date=sent_date,
            internal_date=internal_date,
            headers=tuple(headers),
        )

    return _make


@pytest.fixture()
def key_data() -> bytes:
    """Opaque bytes standing in for an OpenPGP public key."""
    return b"\x99\x01\x0d\x04fake-openpgp-key-material"


@pytest.fixture()
def key_data_b64(key_data: bytes) -> str:
    return base64.b64encode(key_data).decode("ascii")


@pytest.fixture()
def valid_header_value(key_data_b64: str) -> str:
    return f"addr=alice@example.com; prefer-encrypt=mutual; keydata={key_data_b64}"
