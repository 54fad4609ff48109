"""aumai-cryptostatus: Crypto status decisions and Autocrypt trust extraction for mail."""

from aumai_cryptostatus.autocrypt import AutocryptHeaderParser, PeerUpdateBuilder
from aumai_cryptostatus.core import (
    CryptoStatusError,
    CryptoStatusResolver,
    build_crypto_status,
)
from aumai_cryptostatus.interactor import (
    CryptoProvider,
    RecipientStatusMapper,
    refresh_crypto_status,
    refresh_crypto_status_async,
)
from aumai_cryptostatus.models import (
    AttachErrorState,
    AutocryptHeader,
    ComposeCryptoStatus,
    CryptoMode,
    CryptoProviderState,
    DisplayStatus,
    InboundMessage,
    PeerTrustUpdate,
    ProviderAutocryptStatus,
    ProviderError,
    ProviderRequest,
    ProviderResponse,
    ProviderResultCode,
    Recipient,
    RecipientStatusResult,
    RecipientTrustStatus,
    SendErrorState,
    SpecialModeDisplay,
)

__version__ = "0.1.0"

__all__ = [
    "AttachErrorState",
    "AutocryptHeader",
    "AutocryptHeaderParser",
    "ComposeCryptoStatus",
    "CryptoMode",
    "CryptoProvider",
    "CryptoProviderState",
    "CryptoStatusError",
    "CryptoStatusResolver",
    "DisplayStatus",
    "InboundMessage",
    "PeerTrustUpdate",
    "PeerUpdateBuilder",
    "ProviderAutocryptStatus",
    "ProviderError",
    "ProviderRequest",
    "ProviderResponse",
    "ProviderResultCode",
    "Recipient",
    "RecipientStatusMapper",
    "RecipientStatusResult",
    "RecipientTrustStatus",
    "SendErrorState",
    "SpecialModeDisplay",
    "build_crypto_status",
    "refresh_crypto_status",
    "refresh_crypto_status_async",
]
