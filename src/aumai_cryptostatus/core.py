"""Crypto status resolution for outgoing messages."""

from __future__ import annotations

from collections.abc import Sequence
from typing import assert_never

from aumai_cryptostatus.models import (
    AttachErrorState,
    ComposeCryptoStatus,
    CryptoMode,
    CryptoProviderState,
    DisplayStatus,
    Recipient,
    RecipientTrustStatus,
    SendErrorState,
    SpecialModeDisplay,
)


class CryptoStatusError(RuntimeError):
    """Raised when a status is queried before the data it depends on exists."""


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def build_crypto_status(
    *,
    provider_state: CryptoProviderState,
    mode: CryptoMode,
    recipients: Sequence[Recipient],
    pgp_inline_enabled: bool,
    signing_key_id: int | None = None,
    self_encrypt_key_id: int | None = None,
) -> ComposeCryptoStatus:
    """Create the initial status snapshot for a message being composed.

    Recipient addresses are taken from *recipients* in order.  The snapshot
    carries no recipient trust status yet.

    Raises:
        pydantic.ValidationError: if a required field is ``None`` or invalid.
    """
    addresses = None if recipients is None else tuple(r.address for r in recipients)
    return ComposeCryptoStatus(
        provider_state=provider_state,
        mode=mode,
        signing_key_id=signing_key_id,
        self_encrypt_key_id=self_encrypt_key_id,
        recipient_addresses=addresses,
        pgp_inline_enabled=pgp_inline_enabled,
    )


# ---------------------------------------------------------------------------
# CryptoStatusResolver
# ---------------------------------------------------------------------------


class CryptoStatusResolver:
    """Derive display and send decisions from a :class:`ComposeCryptoStatus`.

    Holds no state; one instance can be shared between threads.
    """

    def resolve_display_status(self, status: ComposeCryptoStatus) -> DisplayStatus:
        """Return the status the compose UI should show.

        Raises:
            CryptoStatusError: if the provider is ok, the mode needs recipient
                keys, and no trust status has been folded in yet.
        """
        match status.provider_state:
            case CryptoProviderState.unconfigured:
                return DisplayStatus.unconfigured
            case CryptoProviderState.uninitialized:
                return DisplayStatus.uninitialized
            case CryptoProviderState.error | CryptoProviderState.lost_connection:
                return DisplayStatus.error
            case CryptoProviderState.ok:
                pass
            case _:
                assert_never(status.provider_state)

        if status.mode == CryptoMode.disable:
            return DisplayStatus.disabled

        trust = status.recipient_trust_status
        if trust is None:
            if status.mode == CryptoMode.sign_only:
                return DisplayStatus.sign_only
            raise CryptoStatusError(
                "Display status must be resolved after the recipient trust query"
            )

        if trust == RecipientTrustStatus.error:
            return DisplayStatus.error

        match status.mode:
            case CryptoMode.sign_only:
                return DisplayStatus.sign_only
            case CryptoMode.private:
                return _tiered_display(
                    trust,
                    empty=DisplayStatus.private_empty,
                    trusted=DisplayStatus.private_trusted,
                    untrusted=DisplayStatus.private_untrusted,
                    nokey=DisplayStatus.private_nokey,
                )
            case CryptoMode.opportunistic:
                return _tiered_display(
                    trust,
                    empty=DisplayStatus.opportunistic_empty,
                    trusted=DisplayStatus.opportunistic_trusted,
                    untrusted=DisplayStatus.opportunistic_untrusted,
                    nokey=DisplayStatus.opportunistic_nokey,
                )
            case CryptoMode.disable:
                return DisplayStatus.disabled
            case _:
                assert_never(status.mode)

    def resolve_special_mode_display(
        self, status: ComposeCryptoStatus
    ) -> SpecialModeDisplay:
        if not status.is_provider_state_ok:
            return SpecialModeDisplay.none

        if status.is_sign_only and status.pgp_inline_enabled:
            return SpecialModeDisplay.sign_only_pgp_inline
        if status.is_sign_only:
            return SpecialModeDisplay.sign_only
        if self.is_encryption_enabled(status) and status.pgp_inline_enabled:
            return SpecialModeDisplay.pgp_inline

        return SpecialModeDisplay.none

    def should_use_crypto_message_builder(self, status: ComposeCryptoStatus) -> bool:
        return (
            status.provider_state != CryptoProviderState.unconfigured
            and status.mode != CryptoMode.disable
        )

    def can_encrypt(self, status: ComposeCryptoStatus) -> bool:
        """True once a trust query reported usable keys for every recipient."""
        trust = status.recipient_trust_status
        return trust is not None and trust.can_encrypt

    def is_encryption_enabled(self, status: ComposeCryptoStatus) -> bool:
        """Whether the message will be encrypted.

        Opportunistic mode switches encryption on by itself as soon as the
        recipients' keys are usable.
        """
        match status.mode:
            case CryptoMode.private:
                return True
            case CryptoMode.opportunistic:
                return self.can_encrypt(status)
            case CryptoMode.sign_only | CryptoMode.disable:
                return False
            case _:
                assert_never(status.mode)

    def is_signing_enabled(self, status: ComposeCryptoStatus) -> bool:
        return status.mode != CryptoMode.disable

    def is_encryption_enabled_error(self, status: ComposeCryptoStatus) -> bool:
        return self.is_encryption_enabled(status) and not self.can_encrypt(status)

    def get_send_error_state(
        self, status: ComposeCryptoStatus
    ) -> SendErrorState | None:
        """Return the error blocking send, or ``None`` if sending may proceed."""
        if not status.is_provider_state_ok:
            return SendErrorState.provider_error
        if self.is_encryption_enabled_error(status):
            return SendErrorState.enabled_error
        return None

    def get_attach_error_state(
        self, status: ComposeCryptoStatus
    ) -> AttachErrorState | None:
        """Return why regular file attachments are not allowed, or ``None``."""
        if status.provider_state == CryptoProviderState.unconfigured:
            return None
        if status.pgp_inline_enabled:
            return AttachErrorState.is_inline
        return None


def _tiered_display(
    trust: RecipientTrustStatus,
    *,
    empty: DisplayStatus,
    trusted: DisplayStatus,
    untrusted: DisplayStatus,
    nokey: DisplayStatus,
) -> DisplayStatus:
    match trust:
        case RecipientTrustStatus.no_recipients:
            return empty
        case RecipientTrustStatus.error:
            return DisplayStatus.error
    # discourage_confirmed is confirmed but unusable, so nokey comes first.
    if not trust.can_encrypt:
        return nokey
    return trusted if trust.is_confirmed else untrusted


__all__ = [
    "CryptoStatusError",
    "CryptoStatusResolver",
    "build_crypto_status",
]
