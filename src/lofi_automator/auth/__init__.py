"""OAuth credential storage and authorization."""

from lofi_automator.auth.session import AuthorizedSession, AuthSession, AuthState
from lofi_automator.auth.store import ClientCredentials, CredentialStore, Token

__all__ = [
    "AuthorizedSession",
    "AuthSession",
    "AuthState",
    "ClientCredentials",
    "CredentialStore",
    "Token",
]
