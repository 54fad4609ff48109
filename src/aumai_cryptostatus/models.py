"""Pydantic models for aumai-cryptostatus."""

from __future__ import annotations

import email.utils
from datetime import UTC, datetime
from email.message import Message
from enum import Enum
from typing import Any

from pydantic import AwareDatetime, BaseModel, Field

# ---------------------------------------------------------------------------
# Compose-side enumerations
# ---------------------------------------------------------------------------


class CryptoProviderState(str, Enum):
    """Reachability of the external cryptographic provider."""

    unconfigured = "unconfigured"
    uninitialized = "uninitialized"
    ok = "ok"
    error = "error"
    lost_connection = "lost_connection"


_LEGACY_CRYPTO_MODES = {
    "NO_CHOICE": "opportunistic",
    "CHOICE_ENABLED": "private",
    "CHOICE_DISABLED": "disable",
    "SIGN_ONLY": "sign_only",
}


class CryptoMode(str, Enum):
    """The sender's explicit crypto intent for an outgoing message."""

    disable = "disable"
    sign_only = "sign_only"
    opportunistic = "opportunistic"
    private = "private"

    @classmethod
    def from_legacy(cls, name: str) -> CryptoMode:
        """Translate a mode name from the older "choice" model.

        Raises:
            ValueError: if *name* is not one of the four historical modes.
        """
        try:
            return cls(_LEGACY_CRYPTO_MODES[name.strip().upper()])
        except KeyError:
            raise ValueError(f"Unknown legacy crypto mode: {name!r}") from None


class RecipientTrustStatus(str, Enum):
    """Key status aggregated over *all* recipients of a message."""

    no_recipients = "no_recipients"
    unavailable = "unavailable"
    discourage_unconfirmed = "discourage_unconfirmed"
    discourage_confirmed = "discourage_confirmed"
    available_unconfirmed = "available_unconfirmed"
    available_confirmed = "available_confirmed"
    recommended_unconfirmed = "recommended_unconfirmed"
    recommended_confirmed = "recommended_confirmed"
    error = "error"

    @property
    def can_encrypt(self) -> bool:
        return self in _ENCRYPTABLE_TRUST

    @property
    def is_confirmed(self) -> bool:
        return self in _CONFIRMED_TRUST


_ENCRYPTABLE_TRUST = frozenset(
    {
        RecipientTrustStatus.available_unconfirmed,
        RecipientTrustStatus.available_confirmed,
        RecipientTrustStatus.recommended_unconfirmed,
        RecipientTrustStatus.recommended_confirmed,
    }
)

_CONFIRMED_TRUST = frozenset(
    {
        RecipientTrustStatus.discourage_confirmed,
        RecipientTrustStatus.available_confirmed,
        RecipientTrustStatus.recommended_confirmed,
    }
)


class DisplayStatus(str, Enum):
    """Crypto status shown to the user while composing."""

    unconfigured = "unconfigured"
    uninitialized = "uninitialized"
    error = "error"
    disabled = "disabled"
    sign_only = "sign_only"
    opportunistic_empty = "opportunistic_empty"
    opportunistic_trusted = "opportunistic_trusted"
    opportunistic_untrusted = "opportunistic_untrusted"
    opportunistic_nokey = "opportunistic_nokey"
    private_empty = "private_empty"
    private_trusted = "private_trusted"
    private_untrusted = "private_untrusted"
    private_nokey = "private_nokey"


class SpecialModeDisplay(str, Enum):
    """Overlay shown next to the display status."""

    none = "none"
    pgp_inline = "pgp_inline"
    sign_only = "sign_only"
    sign_only_pgp_inline = "sign_only_pgp_inline"


class SendErrorState(str, Enum):
    provider_error = "provider_error"
    enabled_error = "enabled_error"


class AttachErrorState(str, Enum):
    is_inline = "is_inline"


# ---------------------------------------------------------------------------
# Compose-side values
# ---------------------------------------------------------------------------


class Recipient(BaseModel):
    """A single addressee picked in the compose UI."""

    model_config = {"frozen": True}

    address: str = Field(min_length=1)
    display_name: str | None = None


class ComposeCryptoStatus(BaseModel):
    """Immutable snapshot of everything the send pipeline needs to decide on crypto.

    Built once through :func:`aumai_cryptostatus.core.build_crypto_status`;
    the provider query result is added with :meth:`with_recipient_trust_status`,
    which returns a new snapshot.
    """

    model_config = {"frozen": True}

    provider_state: CryptoProviderState
    mode: CryptoMode
    signing_key_id: int | None = None
    self_encrypt_key_id: int | None = None
    recipient_addresses: tuple[str, ...]
    pgp_inline_enabled: bool
    recipient_trust_status: RecipientTrustStatus | None = None
    pending_interaction: Any = None

    @property
    def has_recipients(self) -> bool:
        return len(self.recipient_addresses) > 0

    @property
    def has_pending_interaction(self) -> bool:
        return self.pending_interaction is not None

    @property
    def is_provider_state_ok(self) -> bool:
        return self.provider_state == CryptoProviderState.ok

    @property
    def is_sign_only(self) -> bool:
        return self.mode == CryptoMode.sign_only

    def with_recipient_trust_status(
        self,
        status: RecipientTrustStatus,
        pending_interaction: Any = None,
    ) -> ComposeCryptoStatus:
        """Return a copy of this snapshot carrying *status*."""
        return self.model_copy(
            update={
                "recipient_trust_status": status,
                "pending_interaction": pending_interaction,
            }
        )


# ---------------------------------------------------------------------------
# Provider query contract
# ---------------------------------------------------------------------------


class ProviderResultCode(str, Enum):
    success = "success"
    error = "error"
    user_interaction_required = "user_interaction_required"


class ProviderAutocryptStatus(str, Enum):
    unavailable = "unavailable"
    discourage = "discourage"
    available = "available"
    recommend = "recommend"


class ProviderError(BaseModel):
    """Error details attached to a failed provider call."""

    model_config = {"frozen": True}

    error_id: int
    message: str


class ProviderRequest(BaseModel):
    """Request sent to the provider asking for the recipients' autocrypt status."""

    model_config = {"frozen": True}

    action: str = "query_autocrypt_status"
    user_ids: tuple[str, ...]


class ProviderResponse(BaseModel):
    """Provider reply.

    ``result_code`` keeps raw values the enum does not know so that the mapper
    can classify them instead of failing validation.
    """

    model_config = {"frozen": True}

    result_code: ProviderResultCode | int | str
    autocrypt_status: ProviderAutocryptStatus | None = None
    keys_confirmed: bool = False
    error: ProviderError | None = None
    pending_interaction: Any = None


class RecipientStatusResult(BaseModel):
    """Mapped outcome of one provider query."""

    model_config = {"frozen": True}

    status: RecipientTrustStatus
    pending_interaction: Any = None

    @property
    def has_pending_interaction(self) -> bool:
        return self.pending_interaction is not None


# ---------------------------------------------------------------------------
# Inbound messages and Autocrypt
# ---------------------------------------------------------------------------


class InboundMessage(BaseModel):
    """The parts of a received message that trust extraction looks at."""

    model_config = {"frozen": True}

    from_addresses: tuple[str, ...] = ()
    sent_date: AwareDatetime | None = None
    internal_date: AwareDatetime
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_email(cls, message: Message, internal_date: datetime) -> InboundMessage:
        """Build from a stdlib :class:`email.message.Message`.

        *internal_date* is the time the message store received the message;
        it is not part of the message itself.  A ``Date`` header without a
        zone offset is read as UTC.
        """
        from_values = [str(v) for v in message.get_all("From", [])]
        from_addresses = tuple(
            addr for _, addr in email.utils.getaddresses(from_values) if addr
        )

        sent_date: datetime | None = None
        raw_date = message.get("Date")
        if raw_date:
            try:
                sent_date = email.utils.parsedate_to_datetime(str(raw_date))
            except (TypeError, ValueError):
                sent_date = None
        if sent_date is not None and sent_date.tzinfo is None:
            sent_date = sent_date.replace(tzinfo=UTC)

        return cls(
            from_addresses=from_addresses,
            sent_date=sent_date,
            internal_date=internal_date,
            headers=tuple((k, str(v)) for k, v in message.items()),
        )

    def header_values(self, name: str) -> list[str]:
        """Return every value of header *name* (case-insensitive), in order."""
        wanted = name.lower()
        return [value for key, value in self.headers if key.lower() == wanted]


class AutocryptHeader(BaseModel):
    """A single validated key announcement."""

    model_config = {"frozen": True}

    address: str
    key_data: bytes
    prefer_encrypt_mutual: bool = False
    extension_params: dict[str, str] = Field(
        default_factory=dict,
        description=(
            "Non-critical parameters (names starting with '_'). Names are"
            " lower-cased like MIME parameter names, so '_Foo=Bar' is stored"
            " under '_foo'; values keep their case."
        ),
    )


class PeerTrustUpdate(BaseModel):
    """Update handed to the trust store for the sender of a message."""

    model_config = {"frozen": True}

    peer_address: str
    key_data: bytes
    effective_date: datetime
    is_mutual_preference: bool


__all__ = [
    "AttachErrorState",
    "AutocryptHeader",
    "ComposeCryptoStatus",
    "CryptoMode",
    "CryptoProviderState",
    "DisplayStatus",
    "InboundMessage",
    "PeerTrustUpdate",
    "ProviderAutocryptStatus",
    "ProviderError",
    "ProviderRequest",
    "ProviderResponse",
    "ProviderResultCode",
    "Recipient",
    "RecipientStatusResult",
    "RecipientTrustStatus",
    "SendErrorState",
    "SpecialModeDisplay",
]
