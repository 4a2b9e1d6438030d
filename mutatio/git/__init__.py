"""Git integration: subprocess repository and remote transports."""

from .repository import CheckoutResult, MergeOutcome, Repository
from .transport import (
    DefaultTransport,
    HttpsTokenTransport,
    SshTransport,
    Transport,
    is_ssh_url,
    transport_for_remote,
)

__all__ = [
    "CheckoutResult",
    "DefaultTransport",
    "HttpsTokenTransport",
    "MergeOutcome",
    "Repository",
    "SshTransport",
    "Transport",
    "is_ssh_url",
    "transport_for_remote",
]
