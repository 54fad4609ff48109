"""aumai-cryptostatus quickstart — working demonstrations of the main features.

Run this file directly to verify your installation:

    python examples/quickstart.py
"""

from __future__ import annotations

import base64
from datetime import UTC, datetime

from aumai_cryptostatus import (
    CryptoMode,
    CryptoProviderState,
    CryptoStatusResolver,
    InboundMessage,
    PeerUpdateBuilder,
    ProviderAutocryptStatus,
    ProviderRequest,
    ProviderResponse,
    ProviderResultCode,
    Recipient,
    RecipientStatusMapper,
    build_crypto_status,
    refresh_crypto_status,
)


class StaticProvider:
    """Stand-in for a real crypto provider: every recipient has a usable key."""

    def execute(self, request: ProviderRequest) -> ProviderResponse:
        print(f"  Provider queried for: {list(request.user_ids)}")
        return ProviderResponse(
            result_code=ProviderResultCode.success,
            autocrypt_status=ProviderAutocryptStatus.available,
            keys_confirmed=False,
        )


# ---------------------------------------------------------------------------
# Demo 1 — Compose status with opportunistic encryption
# ---------------------------------------------------------------------------


def demo_compose_status() -> None:
    """Build a status, query the provider, and resolve what the UI shows."""

    print("\n=== Demo 1: Compose Status ===")

    status = build_crypto_status(
        provider_state=CryptoProviderState.ok,
        mode=CryptoMode.opportunistic,
        recipients=[Recipient(address="bob@example.com")],
        pgp_inline_enabled=False,
    )
    refreshed = refresh_crypto_status(status, StaticProvider(), RecipientStatusMapper())

    resolver = CryptoStatusResolver()
    display = resolver.resolve_display_status(refreshed)
    print(f"  Trust status      : {refreshed.recipient_trust_status.value}")
    print(f"  Display status    : {display.value}")
    print(f"  Encryption enabled: {resolver.is_encryption_enabled(refreshed)}")
    print(f"  Send error        : {resolver.get_send_error_state(refreshed)}")
    assert status.recipient_trust_status is None, "original snapshot was modified"

    print("  Demo 1 passed.")


# ---------------------------------------------------------------------------
# Demo 2 — Autocrypt peer update from an incoming message
# ---------------------------------------------------------------------------


def demo_peer_update() -> None:
    """Extract a trust store update from a message carrying one Autocrypt header."""

    print("\n=== Demo 2: Autocrypt Peer Update ===")

    key_data = base64.b64encode(b"demo-key").decode("ascii")
    header = f"addr=alice@example.com; prefer-encrypt=mutual; keydata={key_data}"
    message = InboundMessage(
        from_addresses=("alice@example.com",),
        sent_date=datetime(2020, 1, 2, tzinfo=UTC),
        internal_date=datetime(2020, 1, 1, tzinfo=UTC),
        headers=(("Autocrypt", header),),
    )
    update = PeerUpdateBuilder().build_peer_update(message)
    assert update is not None
    print(f"  Peer          : {update.peer_address}")
    print(f"  Effective date: {update.effective_date.isoformat()}")
    print(f"  Mutual        : {update.is_mutual_preference}")

    print("  Demo 2 passed.")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run all quickstart demos in sequence."""
    print("aumai-cryptostatus quickstart demos")
    print("=" * 45)

    demo_compose_status()
    demo_peer_update()

    print("\n" + "=" * 45)
    print("All demos completed successfully.")


if __name__ == "__main__":
    main()
