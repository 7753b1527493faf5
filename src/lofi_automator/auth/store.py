"""Persistence for OAuth client configuration and tokens."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

from lofi_automator.constants import YouTube
from lofi_automator.errors import ConfigurationError

logger = structlog.get_logger()


@dataclass(frozen=True)
class ClientCredentials:
    """OAuth client configuration from the client secrets file."""

    client_id: str
    client_secret: str
    redirect_uri: str
    auth_uri: str = YouTube.AUTH_URI
    token_uri: str = YouTube.TOKEN_URI

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClientCredentials":
        """Parse Google's ``installed``/``web`` wrapper or a flat object.

        Both snake_case (as downloaded from the Cloud Console) and camelCase
        keys are accepted.
        """
        section = data.get("installed") or data.get("web") or data

        def pick(*names: str) -> Any:
            for name in names:
                if section.get(name):
                    return section[name]
            raise KeyError(names[0])

        redirect_uris = pick("redirect_uris", "redirectUris")
        if isinstance(redirect_uris, str):
            redirect_uris = [redirect_uris]

        return cls(
            client_id=pick("client_id", "clientId"),
            client_secret=pick("client_secret", "clientSecret"),
            redirect_uri=redirect_uris[0],
            auth_uri=section.get("auth_uri", YouTube.AUTH_URI),
            token_uri=section.get("token_uri", YouTube.TOKEN_URI),
        )

    def to_client_config(self) -> dict[str, Any]:
        """Client config in the shape google_auth_oauthlib expects."""
        return {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uris": [self.redirect_uri],
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
            }
        }


@dataclass(frozen=True)
class Token:
    """Persisted access/refresh credential.

    ``expiry`` is a naive UTC datetime, matching google-auth.
    """

    access_token: str | None
    refresh_token: str | None
    expiry: datetime | None = None
    token_uri: str = YouTube.TOKEN_URI
    scopes: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expiry": self.expiry.isoformat() if self.expiry else None,
            "token_uri": self.token_uri,
            "scopes": list(self.scopes),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Token":
        # "token"/"scope" come from google-auth's authorized-user JSON
        expiry = data.get("expiry") or data.get("expiry_date")
        if isinstance(expiry, str):
            expiry = datetime.fromisoformat(expiry.replace("Z", "+00:00"))
            if expiry.tzinfo is not None:
                expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)
        elif isinstance(expiry, (int, float)):
            expiry = datetime.fromtimestamp(expiry / 1000, tz=timezone.utc).replace(tzinfo=None)

        scopes = data.get("scopes") or data.get("scope") or ()
        if isinstance(scopes, str):
            scopes = scopes.split()

        return cls(
            access_token=data.get("access_token") or data.get("token"),
            refresh_token=data.get("refresh_token"),
            expiry=expiry,
            token_uri=data.get("token_uri", YouTube.TOKEN_URI),
            scopes=tuple(scopes),
        )


class CredentialStore:
    """Reads client secrets and reads/writes the token file."""

    def __init__(self, client_secrets_path: Path, token_path: Path) -> None:
        self.client_secrets_path = Path(client_secrets_path)
        self.token_path = Path(token_path)

    def load_credentials(self) -> ClientCredentials | None:
        """Load client credentials, or None when the file is absent.

        Raises:
            ConfigurationError: The file exists but is not a usable client config
        """
        if not self.client_secrets_path.exists():
            logger.warning("client_secrets_not_found", path=str(self.client_secrets_path))
            return None

        try:
            with open(self.client_secrets_path, encoding="utf-8") as f:
                data = json.load(f)
            credentials = ClientCredentials.from_dict(data)
        except (OSError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise ConfigurationError(
                f"{self.client_secrets_path} is not a valid OAuth client file: {e!r}"
            ) from e

        logger.info("client_secrets_loaded", path=str(self.client_secrets_path))
        return credentials

    def load_token(self) -> Token | None:
        """Load the persisted token, or None when absent or unreadable."""
        if not self.token_path.exists():
            return None

        try:
            with open(self.token_path, encoding="utf-8") as f:
                token = Token.from_dict(json.load(f))
        except (OSError, TypeError, ValueError, AttributeError) as e:
            logger.warning("token_load_failed", path=str(self.token_path), error=str(e))
            return None

        logger.info("token_loaded", path=str(self.token_path))
        return token

    def save_token(self, token: Token) -> None:
        """Persist the token via temp file + rename.

        Readers see either the old file or the complete new one.
        """
        directory = self.token_path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=directory, prefix=f".{self.token_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(token.to_dict(), f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.token_path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("token_saved", path=str(self.token_path))
