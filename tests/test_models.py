"""Tests for Pydantic models in aumai_cryptostatus.models."""

from __future__ import annotations

from datetime import UTC, datetime
from email.message import Message

import pytest
from pydantic import ValidationError

from aumai_cryptostatus.models import (
    ComposeCryptoStatus,
    CryptoMode,
    CryptoProviderState,
    InboundMessage,
    ProviderResponse,
    ProviderResultCode,
    Recipient,
    RecipientTrustStatus,
)

# ---------------------------------------------------------------------------
# CryptoMode
# ---------------------------------------------------------------------------


class TestCryptoMode:
    def test_is_string_enum(self) -> None:
        assert isinstance(CryptoMode.private, str)
        assert CryptoMode("opportunistic") == CryptoMode.opportunistic

    def test_invalid_value_raises(self) -> None:
        with pytest.raises(ValueError):
            CryptoMode("choice_enabled")

    @pytest.mark.parametrize(
        ("legacy", "expected"),
        [
            ("NO_CHOICE", CryptoMode.opportunistic),
            ("CHOICE_ENABLED", CryptoMode.private),
            ("CHOICE_DISABLED", CryptoMode.disable),
            ("SIGN_ONLY", CryptoMode.sign_only),
            ("choice_enabled", CryptoMode.private),
        ],
    )
    def test_from_legacy(self, legacy: str, expected: CryptoMode) -> None:
        assert CryptoMode.from_legacy(legacy) == expected

    def test_from_legacy_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown legacy crypto mode"):
            CryptoMode.from_legacy("ALWAYS")


# ---------------------------------------------------------------------------
# RecipientTrustStatus
# ---------------------------------------------------------------------------


class TestRecipientTrustStatus:
    def test_can_encrypt_only_for_available_and_recommended(self) -> None:
        encryptable = {s for s in RecipientTrustStatus if s.can_encrypt}
        assert encryptable == {
            RecipientTrustStatus.available_unconfirmed,
            RecipientTrustStatus.available_confirmed,
            RecipientTrustStatus.recommended_unconfirmed,
            RecipientTrustStatus.recommended_confirmed,
        }

    def test_is_confirmed(self) -> None:
        assert RecipientTrustStatus.recommended_confirmed.is_confirmed
        assert RecipientTrustStatus.discourage_confirmed.is_confirmed
        assert not RecipientTrustStatus.available_unconfirmed.is_confirmed
        assert not RecipientTrustStatus.no_recipients.is_confirmed


# ---------------------------------------------------------------------------
# ComposeCryptoStatus
# ---------------------------------------------------------------------------


def _sample_status(**overrides: object) -> ComposeCryptoStatus:
    defaults: dict[str, object] = {
        "provider_state": CryptoProviderState.ok,
        "mode": CryptoMode.private,
        "recipient_addresses": ("bob@example.com",),
        "pgp_inline_enabled": False,
    }
    defaults.update(overrides)
    return ComposeCryptoStatus(**defaults)  # type: ignore[arg-type]


class TestComposeCryptoStatus:
    def test_is_frozen(self) -> None:
        status = _sample_status()
        with pytest.raises(ValidationError):
            status.mode = CryptoMode.disable  # type: ignore[misc]

    def test_missing_provider_state_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ComposeCryptoStatus(  # type: ignore[call-arg]
                mode=CryptoMode.private,
                recipient_addresses=(),
                pgp_inline_enabled=False,
            )

    def test_with_trust_status_returns_new_snapshot(self) -> None:
        original = _sample_status()
        updated = original.with_recipient_trust_status(
            RecipientTrustStatus.available_confirmed, pending_interaction="handle"
        )
        assert updated is not original
        assert original.recipient_trust_status is None
        assert original.has_pending_interaction is False
        assert updated.recipient_trust_status == RecipientTrustStatus.available_confirmed
        assert updated.has_pending_interaction is True
        assert updated.recipient_addresses == original.recipient_addresses
        assert updated.mode == original.mode

    def test_predicates(self) -> None:
        status = _sample_status(mode=CryptoMode.sign_only, recipient_addresses=())
        assert status.is_sign_only is True
        assert status.has_recipients is False
        assert status.is_provider_state_ok is True


# ---------------------------------------------------------------------------
# Recipient
# ---------------------------------------------------------------------------


class TestRecipient:
    def test_empty_address_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Recipient(address="")


# ---------------------------------------------------------------------------
# ProviderResponse
# ---------------------------------------------------------------------------


class TestProviderResponse:
    def test_known_code(self) -> None:
        response = ProviderResponse(result_code=ProviderResultCode.success)
        assert response.result_code == ProviderResultCode.success
        assert response.keys_confirmed is False

    def test_unknown_code_preserved(self) -> None:
        response = ProviderResponse(result_code=42)
        assert response.result_code == 42


# ---------------------------------------------------------------------------
# InboundMessage
# ---------------------------------------------------------------------------


class TestInboundMessage:
    def test_header_values_case_insensitive(self) -> None:
        message = InboundMessage(
            internal_date=datetime(2020, 1, 1, tzinfo=UTC),
            headers=(("autocrypt", "a"), ("Subject", "s"), ("AUTOCRYPT", "b")),
        )
        assert message.header_values("Autocrypt") == ["a", "b"]
        assert message.header_values("X-Missing") == []

    def test_naive_internal_date_rejected(self) -> None:
        with pytest.raises(ValidationError):
            InboundMessage(internal_date=datetime(2020, 1, 1))

    def test_from_email(self) -> None:
        msg = Message()
        msg["From"] = "Alice <Alice@Example.com>"
        msg["Date"] = "Thu, 02 Jan 2020 10:00:00 +0000"
        msg["Autocrypt"] = "addr=alice@example.com; keydata=AAAA"
        received = datetime(2020, 1, 3, tzinfo=UTC)

        inbound = InboundMessage.from_email(msg, received)

        assert inbound.from_addresses == ("Alice@Example.com",)
        assert inbound.sent_date == datetime(2020, 1, 2, 10, 0, tzinfo=UTC)
        assert inbound.internal_date == received
        assert inbound.header_values("Autocrypt") == [
            "addr=alice@example.com; keydata=AAAA"
        ]

    def test_from_email_without_date_or_from(self) -> None:
        msg = Message()
        msg["Subject"] = "no sender"
        inbound = InboundMessage.from_email(msg, datetime(2020, 1, 3, tzinfo=UTC))
        assert inbound.from_addresses == ()
        assert inbound.sent_date is None

    def test_from_email_bad_date_ignored(self) -> None:
        msg = Message()
        msg["Date"] = "not a date"
        inbound = InboundMessage.from_email(msg, datetime(2020, 1, 3, tzinfo=UTC))
        assert inbound.sent_date is None

    def test_from_email_naive_date_read_as_utc(self) -> None:
        msg = Message()
        msg["Date"] = "Thu, 02 Jan 2020 10:00:00 -0000"
        inbound = InboundMessage.from_email(msg, datetime(2020, 1, 3, tzinfo=UTC))
        assert inbound.sent_date == datetime(2020, 1, 2, 10, 0, tzinfo=UTC)
