"""
Google OAuth2 token management.
Handles the authorization-code bootstrap and access-token refresh.
"""

import time
from dataclasses import replace
from typing import Any, Callable, Dict, Optional

import requests
from google_auth_oauthlib.flow import Flow

from daily_agenda.core.config_manager import Config
from daily_agenda.core.exceptions import (
    ExchangeRejectedError,
    MissingCredentialsError,
    NotAuthenticatedError,
    RefreshRejectedError,
    TransportFailureError,
)
from daily_agenda.models.credential import Credential, TokenStatus
from daily_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class TokenManager:
    """
    Owns the OAuth2 credential and hands out valid access tokens.

    Not safe for concurrent use: two overlapping refreshes would both hit the
    token endpoint and both persist. Callers run one request at a time.
    """

    def __init__(
        self,
        credential: Credential,
        persist: Callable[[Credential], None],
        clock: Callable[[], int] = _now_ms
    ):
        """
        Initialize the token manager.

        Args:
            credential: Current credential state
            persist: Write-through callback invoked with the updated credential
                before any success is reported
            clock: Returns the current time in epoch milliseconds
        """
        self.credential = credential
        self._persist = persist
        self._clock = clock

    def ensure_valid_access_token(self) -> str:
        """
        Return a usable access token, refreshing it when needed.

        Returns:
            Bearer token valid for at least Config.EXPIRY_BUFFER_MS

        Raises:
            NotAuthenticatedError: No refresh token is stored
            RefreshRejectedError: Provider answered without an access token
            TransportFailureError: Network or parse failure
        """
        if not self.credential.refresh_token:
            logger.warning("No refresh token stored; OAuth setup incomplete")
            raise NotAuthenticatedError()

        now = self._clock()
        if self.credential.is_access_token_usable(now, Config.EXPIRY_BUFFER_MS):
            logger.debug("Access token still valid, skipping refresh")
            return self.credential.access_token

        logger.info("Refreshing access token")
        data = self._post_token_request({
            'client_id': self.credential.client_id,
            'client_secret': self.credential.client_secret,
            'refresh_token': self.credential.refresh_token,
            'grant_type': 'refresh_token',
        })

        access_token = data.get('access_token')
        if not access_token:
            logger.error(f"Token refresh rejected: {data.get('error', 'no access_token in response')}")
            raise RefreshRejectedError()

        updated = replace(
            self.credential,
            access_token=access_token,
            access_token_expiry=self._expiry_from(now, data),
        )
        self._persist(updated)
        self.credential = updated

        logger.info("Access token refreshed successfully")
        return access_token

    def exchange_authorization_code(self, code: str) -> None:
        """
        Exchange a one-time authorization code for the initial token pair.

        Args:
            code: Code pasted by the user after granting consent

        Raises:
            MissingCredentialsError: Client id or secret not configured
            ExchangeRejectedError: Provider answered without a refresh token
            TransportFailureError: Network or parse failure
        """
        if not self.credential.has_client:
            raise MissingCredentialsError()

        logger.info("Exchanging authorization code for tokens")
        now = self._clock()
        data = self._post_token_request({
            'code': code.strip(),
            'client_id': self.credential.client_id,
            'client_secret': self.credential.client_secret,
            'redirect_uri': Config.REDIRECT_URI,
            'grant_type': 'authorization_code',
        })

        refresh_token = data.get('refresh_token')
        if not refresh_token:
            logger.error(f"Code exchange rejected: {data.get('error', 'no refresh_token in response')}")
            raise ExchangeRejectedError()

        updated = replace(
            self.credential,
            refresh_token=refresh_token,
            access_token=data.get('access_token') or '',
            access_token_expiry=self._expiry_from(now, data),
        )
        self._persist(updated)
        self.credential = updated

        logger.info("Authorization code exchanged; credential saved")

    def authorization_url(self) -> str:
        """
        Build the Google consent URL for read-only calendar access.

        Raises:
            MissingCredentialsError: Client id not configured
        """
        if not self.credential.client_id:
            raise MissingCredentialsError("Client ID is required")

        flow = Flow.from_client_config(
            {
                'installed': {
                    'client_id': self.credential.client_id,
                    'client_secret': self.credential.client_secret,
                    'auth_uri': Config.AUTH_URI,
                    'token_uri': Config.TOKEN_URI,
                    'redirect_uris': [Config.REDIRECT_URI],
                }
            },
            scopes=Config.GOOGLE_SCOPES,
            redirect_uri=Config.REDIRECT_URI,
            # The code is exchanged by a plain form POST, so no PKCE verifier
            autogenerate_code_verifier=False,
        )
        url, _state = flow.authorization_url(access_type='offline', prompt='consent')
        return url

    def status(self) -> TokenStatus:
        return TokenStatus(
            authenticated=self.credential.is_authenticated,
            expires_at=self.credential.expiry_datetime(),
        )

    def _expiry_from(self, now: int, data: Dict[str, Any]) -> int:
        expires_in = data.get('expires_in') or Config.DEFAULT_EXPIRES_IN
        try:
            seconds = int(expires_in)
        except (TypeError, ValueError) as e:
            logger.error(f"Token endpoint returned invalid expires_in: {expires_in!r}")
            raise TransportFailureError(f"invalid expires_in {expires_in!r}") from e
        return now + seconds * 1000

    def _post_token_request(self, form: Dict[str, str]) -> Dict[str, Any]:
        """POST a form to the token endpoint and return the decoded JSON body."""
        try:
            response = requests.post(Config.TOKEN_URI, data=form, timeout=Config.REQUEST_TIMEOUT)
        except requests.RequestException as e:
            logger.error(f"Token endpoint unreachable: {e}", exc_info=True)
            raise TransportFailureError(str(e)) from e

        try:
            data: Optional[Any] = response.json()
        except ValueError as e:
            logger.error(f"Token endpoint returned non-JSON body (HTTP {response.status_code})")
            raise TransportFailureError(
                f"HTTP {response.status_code}: unparseable response body"
            ) from e

        if not isinstance(data, dict):
            raise TransportFailureError(f"HTTP {response.status_code}: unexpected response body")

        return data
