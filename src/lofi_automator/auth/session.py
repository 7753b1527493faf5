"""OAuth2 authorization-code session for the YouTube Data API."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build

from lofi_automator.auth.store import ClientCredentials, CredentialStore, Token
from lofi_automator.constants import YouTube
from lofi_automator.errors import AuthError, ConfigurationError
from lofi_automator.logging_config import get_logger

logger = get_logger(__name__)

# Receives the authorization URL, returns the code the operator pasted back
CodeProvider = Callable[[str], str]
FlowFactory = Callable[[ClientCredentials, Sequence[str]], Any]

SETUP_GUIDANCE = """OAuth client file not found: {path}

1. Create a Google Cloud project: https://console.cloud.google.com
2. Enable the YouTube Data API v3:
   https://console.cloud.google.com/apis/library/youtube.googleapis.com
3. Create OAuth credentials (Create Credentials -> OAuth client ID -> Desktop app):
   https://console.cloud.google.com/apis/credentials
4. Download the JSON and save it as {path}
5. Run this command again"""


class AuthState(str, Enum):
    """Lifecycle of an AuthSession."""

    UNCONFIGURED = "unconfigured"
    CREDENTIALS_LOADED = "credentials_loaded"
    TOKEN_VALID = "token_valid"
    AWAITING_AUTHORIZATION = "awaiting_authorization"
    AUTHORIZED = "authorized"
    FAILED = "failed"


def default_flow_factory(client: ClientCredentials, scopes: Sequence[str]) -> Flow:
    return Flow.from_client_config(
        client.to_client_config(),
        scopes=list(scopes),
        redirect_uri=client.redirect_uri,
    )


def token_to_credentials(
    token: Token, client: ClientCredentials, scopes: Sequence[str]
) -> Credentials:
    """Apply a persisted token to a google-auth client handle.

    No network call happens here; google-auth refreshes on first use
    when the access token has expired.
    """
    return Credentials(
        token=token.access_token,
        refresh_token=token.refresh_token,
        token_uri=token.token_uri or client.token_uri,
        client_id=client.client_id,
        client_secret=client.client_secret,
        scopes=list(token.scopes) or list(scopes),
        expiry=token.expiry,
    )


def token_from_credentials(credentials: Credentials) -> Token:
    return Token(
        access_token=credentials.token,
        refresh_token=credentials.refresh_token,
        expiry=credentials.expiry,
        token_uri=credentials.token_uri or YouTube.TOKEN_URI,
        scopes=tuple(credentials.scopes or ()),
    )


@dataclass
class AuthorizedSession:
    """Authorized client handle."""

    credentials: Credentials
    _youtube: Any = field(default=None, init=False, repr=False)

    def youtube(self) -> Any:
        """YouTube Data API v3 resource, built once per session."""
        if self._youtube is None:
            self._youtube = build(
                "youtube", "v3", credentials=self.credentials, cache_discovery=False
            )
        return self._youtube


class AuthSession:
    """Drives the OAuth authorization-code flow.

    States move UNCONFIGURED -> CREDENTIALS_LOADED -> TOKEN_VALID or
    AWAITING_AUTHORIZATION -> AUTHORIZED. There is no way back to
    UNCONFIGURED; a revoked token is recovered by deleting the token
    file and restarting.
    """

    def __init__(
        self,
        store: CredentialStore,
        code_provider: CodeProvider,
        scopes: Sequence[str] = (YouTube.UPLOAD_SCOPE,),
        flow_factory: FlowFactory = default_flow_factory,
    ) -> None:
        self.store = store
        self.code_provider = code_provider
        self.scopes = tuple(scopes)
        self.flow_factory = flow_factory
        self.state = AuthState.UNCONFIGURED
        self._session: AuthorizedSession | None = None

    def _transition(self, state: AuthState, **context: Any) -> None:
        logger.info("auth_state_changed", previous=self.state.value, state=state.value, **context)
        self.state = state

    def authorize(self) -> AuthorizedSession:
        """Produce an authorized session, prompting for a code if needed.

        Raises:
            ConfigurationError: No client secrets file (state stays UNCONFIGURED)
            AuthError: Empty code, rejected exchange, or a previously failed session
        """
        if self.state is AuthState.AUTHORIZED and self._session is not None:
            return self._session
        if self.state is AuthState.FAILED:
            raise AuthError("authorization already failed in this process; run again")

        client = self.store.load_credentials()
        if client is None:
            raise ConfigurationError(SETUP_GUIDANCE.format(path=self.store.client_secrets_path))
        self._transition(AuthState.CREDENTIALS_LOADED, client_id=client.client_id)

        token = self.store.load_token()
        if token is not None:
            self._transition(AuthState.TOKEN_VALID)
            credentials = token_to_credentials(token, client, self.scopes)
        else:
            credentials = self._exchange_code(client)

        self._session = AuthorizedSession(credentials)
        self._transition(AuthState.AUTHORIZED)
        return self._session

    def _exchange_code(self, client: ClientCredentials) -> Credentials:
        self._transition(AuthState.AWAITING_AUTHORIZATION)
        flow = self.flow_factory(client, self.scopes)
        auth_url, _state = flow.authorization_url(access_type="offline", prompt="consent")

        code = (self.code_provider(auth_url) or "").strip()
        if not code:
            self._transition(AuthState.FAILED, reason="empty_code")
            raise AuthError("no authorization code entered")

        try:
            flow.fetch_token(code=code)
        except Exception as e:
            self._transition(AuthState.FAILED, reason="exchange_rejected", error=str(e))
            raise AuthError(f"token exchange rejected: {e}") from e

        credentials = flow.credentials
        self.store.save_token(token_from_credentials(credentials))
        return credentials
