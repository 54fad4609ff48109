"""CLI entry point for aumai-cryptostatus."""

from __future__ import annotations

import email
import email.policy
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

import click

from aumai_cryptostatus.autocrypt import AutocryptHeaderParser, PeerUpdateBuilder
from aumai_cryptostatus.config import CryptoStatusSettings
from aumai_cryptostatus.core import (
    CryptoStatusError,
    CryptoStatusResolver,
    build_crypto_status,
)
from aumai_cryptostatus.logging import setup_logging
from aumai_cryptostatus.models import (
    ComposeCryptoStatus,
    CryptoMode,
    CryptoProviderState,
    InboundMessage,
    Recipient,
    RecipientTrustStatus,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _choice(enum_cls: type) -> click.Choice:
    return click.Choice([member.value for member in enum_cls], case_sensitive=False)


def _describe(status: ComposeCryptoStatus) -> dict[str, object]:
    resolver = CryptoStatusResolver()
    send_error = resolver.get_send_error_state(status)
    attach_error = resolver.get_attach_error_state(status)
    return {
        "display_status": resolver.resolve_display_status(status).value,
        "special_mode": resolver.resolve_special_mode_display(status).value,
        "send_error": send_error.value if send_error else None,
        "attach_error": attach_error.value if attach_error else None,
        "use_crypto_message_builder": resolver.should_use_crypto_message_builder(
            status
        ),
        "encryption_enabled": resolver.is_encryption_enabled(status),
        "signing_enabled": resolver.is_signing_enabled(status),
    }


def _load_message(path: str, internal_date: datetime) -> InboundMessage:
    raw = Path(path).read_bytes()
    message = email.message_from_bytes(raw, policy=email.policy.compat32)
    return InboundMessage.from_email(message, internal_date)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


@click.group()
@click.version_option()
@click.pass_context
def main(ctx: click.Context) -> None:
    """AumAI CryptoStatus: crypto decisions for outgoing and incoming mail."""
    settings = CryptoStatusSettings()
    setup_logging(json=settings.log_json, level=settings.log_level)
    ctx.obj = settings


@main.command("resolve")
@click.option(
    "--provider-state",
    type=_choice(CryptoProviderState),
    default=CryptoProviderState.ok.value,
    show_default=True,
    help="State of the crypto provider.",
)
@click.option(
    "--mode",
    type=_choice(CryptoMode),
    default=None,
    help="Crypto mode (defaults to CRYPTOSTATUS_DEFAULT_MODE).",
)
@click.option(
    "--trust",
    type=_choice(RecipientTrustStatus),
    default=None,
    help="Recipient trust status returned by the provider.",
)
@click.option("--inline", is_flag=True, help="Enable PGP/INLINE mode.")
@click.option(
    "--recipient",
    "recipients",
    multiple=True,
    metavar="ADDR",
    help="Recipient address (repeatable).",
)
@click.option("--json-output", is_flag=True, help="Emit raw JSON.")
@click.pass_obj
def resolve_command(
    settings: CryptoStatusSettings,
    provider_state: str,
    mode: str | None,
    trust: str | None,
    inline: bool,
    recipients: tuple[str, ...],
    json_output: bool,
) -> None:
    """Show the crypto status a compose screen would display."""
    status = build_crypto_status(
        provider_state=CryptoProviderState(provider_state.lower()),
        mode=CryptoMode(mode.lower()) if mode else settings.default_mode,
        recipients=[Recipient(address=addr) for addr in recipients],
        pgp_inline_enabled=inline,
    )
    if trust is not None:
        status = status.with_recipient_trust_status(
            RecipientTrustStatus(trust.lower())
        )

    try:
        report = _describe(status)
    except CryptoStatusError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(report, indent=2))
        return

    for key, value in report.items():
        click.echo(f"{key:<28}: {value}")


@main.command("peer-update")
@click.option(
    "--message",
    "message_path",
    required=True,
    metavar="PATH",
    help="Path to an RFC 822 message file.",
)
@click.option(
    "--internal-date",
    default=None,
    metavar="ISO",
    help="Time the message was received (ISO 8601, default: now).",
)
@click.pass_obj
def peer_update_command(
    settings: CryptoStatusSettings,
    message_path: str,
    internal_date: str | None,
) -> None:
    """Extract the Autocrypt peer update from a received message."""
    try:
        received = (
            datetime.fromisoformat(internal_date)
            if internal_date
            else datetime.now(tz=UTC)
        )
        if received.tzinfo is None:
            received = received.replace(tzinfo=UTC)
        message = _load_message(message_path, received)
    except (OSError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    builder = PeerUpdateBuilder(AutocryptHeaderParser(settings.autocrypt_header))
    update = builder.build_peer_update(message)
    if update is None:
        click.echo("No usable Autocrypt header.", err=True)
        sys.exit(2)

    click.echo(f"Peer           : {update.peer_address}")
    click.echo(f"Effective date : {update.effective_date.isoformat()}")
    click.echo(f"Prefer mutual  : {update.is_mutual_preference}")
    click.echo(f"Key data       : {len(update.key_data):,} bytes")


@main.command("legacy-mode")
@click.argument("name")
def legacy_mode_command(name: str) -> None:
    """Print the crypto mode that a historical mode NAME maps to."""
    try:
        mode = CryptoMode.from_legacy(name)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(mode.value)


if __name__ == "__main__":
    main()
