"""Recipient key status queries against the crypto provider."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Protocol

import structlog

from aumai_cryptostatus.models import (
    ComposeCryptoStatus,
    CryptoMode,
    ProviderAutocryptStatus,
    ProviderRequest,
    ProviderResponse,
    ProviderResultCode,
    RecipientStatusResult,
    RecipientTrustStatus,
)

logger = structlog.get_logger()


class CryptoProvider(Protocol):
    """Anything that can answer an autocrypt status query.

    ``execute`` may block; timeouts and retries belong to the implementation.
    """

    def execute(self, request: ProviderRequest) -> ProviderResponse: ...


_STATUS_TIERS: dict[
    ProviderAutocryptStatus, tuple[RecipientTrustStatus, RecipientTrustStatus]
] = {
    # (unconfirmed, confirmed)
    ProviderAutocryptStatus.unavailable: (
        RecipientTrustStatus.unavailable,
        RecipientTrustStatus.unavailable,
    ),
    ProviderAutocryptStatus.discourage: (
        RecipientTrustStatus.discourage_unconfirmed,
        RecipientTrustStatus.discourage_confirmed,
    ),
    ProviderAutocryptStatus.available: (
        RecipientTrustStatus.available_unconfirmed,
        RecipientTrustStatus.available_confirmed,
    ),
    ProviderAutocryptStatus.recommend: (
        RecipientTrustStatus.recommended_unconfirmed,
        RecipientTrustStatus.recommended_confirmed,
    ),
}


# ---------------------------------------------------------------------------
# RecipientStatusMapper
# ---------------------------------------------------------------------------


class RecipientStatusMapper:
    """Query the provider and normalise its answer to a :class:`RecipientTrustStatus`.

    Stateless; pass one instance to whoever needs it.
    """

    def retrieve_recipient_status(
        self,
        provider: CryptoProvider,
        recipient_addresses: Sequence[str],
    ) -> RecipientStatusResult:
        """Ask *provider* about *recipient_addresses*.  Blocks until it answers."""
        request = ProviderRequest(user_ids=tuple(recipient_addresses))
        response = provider.execute(request)
        return self.map_response(response)

    def map_response(self, response: ProviderResponse) -> RecipientStatusResult:
        try:
            result_code = ProviderResultCode(response.result_code)
        except ValueError:
            logger.warning(
                "provider_unknown_result_code", result_code=response.result_code
            )
            return self._error_result(response)

        if result_code == ProviderResultCode.success:
            autocrypt_status = (
                response.autocrypt_status or ProviderAutocryptStatus.unavailable
            )
            unconfirmed, confirmed = _STATUS_TIERS[autocrypt_status]
            status = confirmed if response.keys_confirmed else unconfirmed
            return RecipientStatusResult(
                status=status, pending_interaction=response.pending_interaction
            )

        if result_code == ProviderResultCode.error:
            if response.error is not None:
                logger.warning(
                    "provider_api_error",
                    error_id=response.error.error_id,
                    error_message=response.error.message,
                )
            else:
                logger.warning("provider_api_unknown_error")
        else:
            # interaction must be resolved before the query runs
            logger.warning("provider_user_interaction_required")

        return self._error_result(response)

    @staticmethod
    def _error_result(response: ProviderResponse) -> RecipientStatusResult:
        return RecipientStatusResult(
            status=RecipientTrustStatus.error,
            pending_interaction=response.pending_interaction,
        )


# ---------------------------------------------------------------------------
# Refresh
# ---------------------------------------------------------------------------


def refresh_crypto_status(
    status: ComposeCryptoStatus,
    provider: CryptoProvider,
    mapper: RecipientStatusMapper,
) -> ComposeCryptoStatus:
    """Return a new snapshot with the recipients' trust status folded in.

    *status* is never modified.  Callers that changed the recipient list while
    this ran must discard the result.
    """
    if not status.is_provider_state_ok or status.mode == CryptoMode.disable:
        return status

    if not status.has_recipients:
        return status.with_recipient_trust_status(RecipientTrustStatus.no_recipients)

    result = mapper.retrieve_recipient_status(provider, status.recipient_addresses)
    logger.debug(
        "recipient_status_retrieved",
        recipients=len(status.recipient_addresses),
        status=result.status.value,
    )
    return status.with_recipient_trust_status(
        result.status, pending_interaction=result.pending_interaction
    )


async def refresh_crypto_status_async(
    status: ComposeCryptoStatus,
    provider: CryptoProvider,
    mapper: RecipientStatusMapper,
) -> ComposeCryptoStatus:
    """Like :func:`refresh_crypto_status`, with the query run in a worker thread."""
    return await asyncio.to_thread(refresh_crypto_status, status, provider, mapper)


__all__ = [
    "CryptoProvider",
    "RecipientStatusMapper",
    "refresh_crypto_status",
    "refresh_crypto_status_async",
]
