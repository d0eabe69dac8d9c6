"""Remote identity service access."""

from .client import IdentityClient, UserAuthentication, YggdrasilIdentityClient
from .transport import HttpResponse, Transport, UrllibTransport

__all__ = [
    "IdentityClient",
    "UserAuthentication",
    "YggdrasilIdentityClient",
    "HttpResponse",
    "Transport",
    "UrllibTransport",
]
