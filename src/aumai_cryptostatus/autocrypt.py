"""Autocrypt header extraction for incoming messages."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable

import structlog

from aumai_cryptostatus.mime import split_header_parameters
from aumai_cryptostatus.models import (
    AutocryptHeader,
    InboundMessage,
    PeerTrustUpdate,
)

logger = structlog.get_logger()

AUTOCRYPT_HEADER = "Autocrypt"

PARAM_ADDR = "addr"
PARAM_KEY_DATA = "keydata"
PARAM_TYPE = "type"
PARAM_PREFER_ENCRYPT = "prefer-encrypt"

SUPPORTED_TYPE = "1"
PREFER_ENCRYPT_MUTUAL = "mutual"


def _decode_key_data(value: str) -> bytes | None:
    compact = "".join(value.split())
    if not compact:
        return None
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        return None


# ---------------------------------------------------------------------------
# AutocryptHeaderParser
# ---------------------------------------------------------------------------


class AutocryptHeaderParser:
    """Validate the Autocrypt headers of a message.

    A message yields a header only when exactly one of its Autocrypt headers
    is valid.  Several valid headers are treated like none at all.
    """

    def __init__(self, header_name: str = AUTOCRYPT_HEADER) -> None:
        self._header_name = header_name

    def has_autocrypt_header(self, message: InboundMessage) -> bool:
        return len(message.header_values(self._header_name)) > 0

    def get_valid_autocrypt_header(
        self, message: InboundMessage
    ) -> AutocryptHeader | None:
        headers = self.parse_all(message.header_values(self._header_name))
        if len(headers) != 1:
            if len(headers) > 1:
                logger.warning("autocrypt_ambiguous_headers", count=len(headers))
            return None
        return headers[0]

    def parse_all(self, header_values: Iterable[str]) -> list[AutocryptHeader]:
        """Parse every raw value, dropping the invalid ones."""
        parsed: list[AutocryptHeader] = []
        for value in header_values:
            header = self.parse_header(value)
            if header is not None:
                parsed.append(header)
        return parsed

    def parse_header(self, header_value: str) -> AutocryptHeader | None:
        """Parse a single raw header value, or return ``None`` if it is invalid."""
        parameters = split_header_parameters(header_value)

        header_type = parameters.pop(PARAM_TYPE, None)
        if header_type is not None and header_type != SUPPORTED_TYPE:
            logger.error(
                "autocrypt_unsupported_type",
                addr=parameters.get(PARAM_ADDR),
                type=header_type,
            )
            return None

        raw_key_data = parameters.pop(PARAM_KEY_DATA, None)
        if raw_key_data is None:
            logger.error("autocrypt_missing_keydata", addr=parameters.get(PARAM_ADDR))
            return None

        key_data = _decode_key_data(raw_key_data)
        if key_data is None:
            logger.error("autocrypt_invalid_keydata", addr=parameters.get(PARAM_ADDR))
            return None

        address = parameters.pop(PARAM_ADDR, None)
        if address is None:
            logger.error("autocrypt_missing_addr")
            return None

        prefer_encrypt = parameters.pop(PARAM_PREFER_ENCRYPT, None)
        prefer_encrypt_mutual = (
            prefer_encrypt is not None
            and prefer_encrypt.lower() == PREFER_ENCRYPT_MUTUAL
        )

        critical = sorted(name for name in parameters if not name.startswith("_"))
        if critical:
            logger.error(
                "autocrypt_unknown_critical_parameter",
                addr=address,
                parameters=critical,
            )
            return None

        return AutocryptHeader(
            address=address,
            key_data=key_data,
            prefer_encrypt_mutual=prefer_encrypt_mutual,
            extension_params=parameters,
        )


# ---------------------------------------------------------------------------
# PeerUpdateBuilder
# ---------------------------------------------------------------------------


class PeerUpdateBuilder:
    """Turn the Autocrypt header of a message into a trust store update."""

    def __init__(self, parser: AutocryptHeaderParser | None = None) -> None:
        self._parser = parser or AutocryptHeaderParser()

    def build_peer_update(self, message: InboundMessage) -> PeerTrustUpdate | None:
        """Return the update for the sender of *message*, or ``None``.

        The header address must match the first From address.  The earlier of
        the sent and internal dates is used, so a replayed old announcement
        cannot look newer than it is.
        """
        header = self._parser.get_valid_autocrypt_header(message)
        if header is None:
            return None

        if not message.from_addresses:
            logger.warning("autocrypt_no_from_address", addr=header.address)
            return None

        from_address = message.from_addresses[0]
        if header.address.lower() != from_address.lower():
            logger.warning(
                "autocrypt_addr_mismatch",
                addr=header.address,
                from_address=from_address,
            )
            return None

        effective_date = message.internal_date
        if message.sent_date is not None and message.sent_date < effective_date:
            effective_date = message.sent_date

        return PeerTrustUpdate(
            peer_address=from_address,
            key_data=header.key_data,
            effective_date=effective_date,
            is_mutual_preference=header.prefer_encrypt_mutual,
        )


__all__ = [
    "AUTOCRYPT_HEADER",
    "AutocryptHeaderParser",
    "PeerUpdateBuilder",
]
