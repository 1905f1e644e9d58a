# File: daily_agenda/models/credential.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pytz

@dataclass
class Credential:
    """OAuth2 client identity plus the current token pair."""
    client_id: str = ""
    client_secret: str = ""
    refresh_token: str = ""
    access_token: str = ""
    access_token_expiry: int = 0  # epoch milliseconds

    @property
    def is_authenticated(self) -> bool:
        """True once an authorization code has been exchanged."""
        return bool(self.refresh_token)

    @property
    def has_client(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def is_access_token_usable(self, now_ms: int, buffer_ms: int) -> bool:
        """Check the token is present and outlives now by more than the buffer."""
        return bool(self.access_token) and self.access_token_expiry > now_ms + buffer_ms

    def expiry_datetime(self) -> Optional[datetime]:
        """Access token expiry as an aware UTC datetime."""
        if not self.access_token_expiry:
            return None
        return datetime.fromtimestamp(self.access_token_expiry / 1000, tz=pytz.utc)

    def __repr__(self) -> str:
        # Never leak secrets into logs or tracebacks
        return (
            f"Credential(client_id={self.client_id!r}, "
            f"authenticated={self.is_authenticated}, "
            f"access_token_expiry={self.access_token_expiry})"
        )


@dataclass(frozen=True)
class TokenStatus:
    """Snapshot shown to the user by the status command."""
    authenticated: bool
    expires_at: Optional[datetime] = None

    def __str__(self) -> str:
        if not self.authenticated:
            return "Not authenticated"
        if self.expires_at is None:
            return "Authenticated (no access token yet)"
        return f"Authenticated (expires {self.expires_at.strftime('%Y-%m-%d %H:%M:%S %Z')})"
