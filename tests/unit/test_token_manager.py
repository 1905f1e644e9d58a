# File: tests/unit/test_token_manager.py
"""
Unit tests for TokenManager.
The token endpoint is mocked at requests.post.
"""

from dataclasses import replace
from unittest.mock import Mock, patch
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from daily_agenda.auth.google_auth import TokenManager
from daily_agenda.core.config_manager import Config
from daily_agenda.core.exceptions import (
    ExchangeRejectedError,
    MissingCredentialsError,
    NotAuthenticatedError,
    RefreshRejectedError,
    TransportFailureError,
)
from daily_agenda.models import Credential


POST = 'daily_agenda.auth.google_auth.requests.post'


# ==================== ensure_valid_access_token ====================

class TestEnsureValidAccessToken:
    """Tests for the refresh-on-demand path."""

    @pytest.mark.parametrize("access_token,expiry_offset", [
        ("", 0),
        ("stale", -1),
        ("live", 3_600_000),
    ])
    @patch(POST)
    def test_missing_refresh_token_fails_without_network(
        self, mock_post, access_token, expiry_offset, now_ms, clock
    ):
        """No refresh token means NotAuthenticated whatever the access token state."""
        credential = Credential(
            client_id="id", client_secret="secret",
            access_token=access_token, access_token_expiry=now_ms + expiry_offset,
        )
        persist = Mock()
        manager = TokenManager(credential, persist, clock=clock)

        with pytest.raises(NotAuthenticatedError):
            manager.ensure_valid_access_token()

        mock_post.assert_not_called()
        persist.assert_not_called()

    @patch(POST)
    def test_fast_path_returns_current_token(self, mock_post, fresh_credential, clock):
        """A token outliving the buffer is returned with no network call."""
        persist = Mock()
        manager = TokenManager(fresh_credential, persist, clock=clock)

        assert manager.ensure_valid_access_token() == "live-access"
        assert manager.ensure_valid_access_token() == "live-access"

        mock_post.assert_not_called()
        persist.assert_not_called()

    @patch(POST)
    def test_token_exactly_at_buffer_is_refreshed(
        self, mock_post, fresh_credential, now_ms, clock, make_token_response
    ):
        """Expiry must be strictly greater than now + buffer."""
        credential = replace(fresh_credential, access_token_expiry=now_ms + Config.EXPIRY_BUFFER_MS)
        mock_post.return_value = make_token_response({'access_token': 'new', 'expires_in': 3600})
        manager = TokenManager(credential, Mock(), clock=clock)

        assert manager.ensure_valid_access_token() == "new"
        mock_post.assert_called_once()

    @patch(POST)
    def test_refresh_posts_form_and_updates_expiry(
        self, mock_post, stale_credential, now_ms, clock, make_token_response
    ):
        """Successful refresh stores the token and now + expires_in * 1000."""
        mock_post.return_value = make_token_response({'access_token': 'new-access', 'expires_in': 1800})
        persist = Mock()
        manager = TokenManager(stale_credential, persist, clock=clock)

        token = manager.ensure_valid_access_token()

        assert token == "new-access"
        assert manager.credential.access_token == "new-access"
        assert manager.credential.access_token_expiry == now_ms + 1_800_000
        assert manager.credential.refresh_token == "refresh-abc"

        args, kwargs = mock_post.call_args
        assert args[0] == Config.TOKEN_URI
        assert kwargs['data'] == {
            'client_id': 'client-123.apps.googleusercontent.com',
            'client_secret': 'shh',
            'refresh_token': 'refresh-abc',
            'grant_type': 'refresh_token',
        }

        persist.assert_called_once_with(manager.credential)

    @patch(POST)
    def test_refresh_defaults_expires_in(self, mock_post, stale_credential, now_ms, clock, make_token_response):
        """Missing expires_in counts as one hour."""
        mock_post.return_value = make_token_response({'access_token': 'new-access'})
        manager = TokenManager(stale_credential, Mock(), clock=clock)

        manager.ensure_valid_access_token()

        assert manager.credential.access_token_expiry == now_ms + 3_600_000

    @patch(POST)
    def test_refreshed_token_is_usable(self, mock_post, stale_credential, now_ms, clock, make_token_response):
        mock_post.return_value = make_token_response({'access_token': 'new-access', 'expires_in': 3599})
        manager = TokenManager(stale_credential, Mock(), clock=clock)

        manager.ensure_valid_access_token()

        assert manager.credential.is_access_token_usable(now_ms, Config.EXPIRY_BUFFER_MS)

    @patch(POST)
    def test_rejected_refresh_leaves_state_untouched(
        self, mock_post, stale_credential, clock, make_token_response
    ):
        """A response without access_token raises and changes nothing."""
        mock_post.return_value = make_token_response({'error': 'invalid_grant'}, status_code=400)
        persist = Mock()
        manager = TokenManager(stale_credential, persist, clock=clock)

        with pytest.raises(RefreshRejectedError):
            manager.ensure_valid_access_token()

        assert manager.credential == stale_credential
        persist.assert_not_called()

    @patch(POST)
    def test_network_error_is_transport_failure(self, mock_post, stale_credential, clock):
        mock_post.side_effect = requests.ConnectionError("connection refused")
        persist = Mock()
        manager = TokenManager(stale_credential, persist, clock=clock)

        with pytest.raises(TransportFailureError, match="connection refused") as exc_info:
            manager.ensure_valid_access_token()

        assert exc_info.value.detail == "connection refused"
        assert manager.credential == stale_credential
        persist.assert_not_called()

    @patch(POST)
    def test_unparseable_body_is_transport_failure(
        self, mock_post, stale_credential, clock, make_token_response
    ):
        mock_post.return_value = make_token_response(status_code=502, json_error=ValueError("not json"))
        manager = TokenManager(stale_credential, Mock(), clock=clock)

        with pytest.raises(TransportFailureError, match="HTTP 502"):
            manager.ensure_valid_access_token()

    @pytest.mark.parametrize("expires_in", ["soon", "3599.5", [3600]])
    @patch(POST)
    def test_malformed_expires_in_is_transport_failure(
        self, mock_post, expires_in, stale_credential, clock, make_token_response
    ):
        mock_post.return_value = make_token_response({'access_token': 'new-access', 'expires_in': expires_in})
        persist = Mock()
        manager = TokenManager(stale_credential, persist, clock=clock)

        with pytest.raises(TransportFailureError, match="invalid expires_in"):
            manager.ensure_valid_access_token()

        persist.assert_not_called()
        assert manager.credential == stale_credential

    @patch(POST)
    def test_persist_failure_keeps_old_token(self, mock_post, stale_credential, clock, make_token_response):
        """The in-memory token only changes after the write-through succeeds."""
        mock_post.return_value = make_token_response({'access_token': 'new-access'})
        persist = Mock(side_effect=OSError("disk full"))
        manager = TokenManager(stale_credential, persist, clock=clock)

        with pytest.raises(OSError):
            manager.ensure_valid_access_token()

        assert manager.credential.access_token == "old-access"


# ==================== exchange_authorization_code ====================

class TestExchangeAuthorizationCode:
    """Tests for the one-time bootstrap."""

    @pytest.mark.parametrize("client_id,client_secret", [("", "secret"), ("id", ""), ("", "")])
    @patch(POST)
    def test_missing_client_fails_without_network(self, mock_post, client_id, client_secret, clock):
        manager = TokenManager(Credential(client_id=client_id, client_secret=client_secret), Mock(), clock=clock)

        with pytest.raises(MissingCredentialsError):
            manager.exchange_authorization_code("4/abc")

        mock_post.assert_not_called()

    @patch(POST)
    def test_exchange_stores_full_credential(
        self, mock_post, unauthenticated_credential, now_ms, clock, make_token_response
    ):
        """Round trip: after exchange the credential is authenticated and usable."""
        mock_post.return_value = make_token_response({
            'access_token': 'first-access',
            'refresh_token': 'first-refresh',
            'expires_in': 3599,
        })
        persist = Mock()
        manager = TokenManager(unauthenticated_credential, persist, clock=clock)

        manager.exchange_authorization_code("  4/abc  ")

        credential = manager.credential
        assert credential.refresh_token == "first-refresh"
        assert credential.access_token == "first-access"
        assert credential.access_token_expiry == now_ms + 3_599_000
        assert credential.is_access_token_usable(now_ms, Config.EXPIRY_BUFFER_MS)
        persist.assert_called_once_with(credential)

        form = mock_post.call_args.kwargs['data']
        assert form['code'] == "4/abc"
        assert form['grant_type'] == "authorization_code"
        assert form['redirect_uri'] == Config.REDIRECT_URI

    @patch(POST)
    def test_exchange_then_fetch_needs_no_refresh(
        self, mock_post, unauthenticated_credential, clock, make_token_response
    ):
        mock_post.return_value = make_token_response({
            'access_token': 'first-access',
            'refresh_token': 'first-refresh',
        })
        manager = TokenManager(unauthenticated_credential, Mock(), clock=clock)

        manager.exchange_authorization_code("4/abc")
        assert manager.ensure_valid_access_token() == "first-access"

        assert mock_post.call_count == 1

    @patch(POST)
    def test_exchange_without_refresh_token_is_rejected(
        self, mock_post, unauthenticated_credential, clock, make_token_response
    ):
        mock_post.return_value = make_token_response({'access_token': 'only-access'})
        persist = Mock()
        manager = TokenManager(unauthenticated_credential, persist, clock=clock)

        with pytest.raises(ExchangeRejectedError):
            manager.exchange_authorization_code("4/abc")

        assert manager.credential == unauthenticated_credential
        persist.assert_not_called()

    @patch(POST)
    def test_exchange_network_error(self, mock_post, unauthenticated_credential, clock):
        mock_post.side_effect = requests.Timeout("timed out")
        manager = TokenManager(unauthenticated_credential, Mock(), clock=clock)

        with pytest.raises(TransportFailureError):
            manager.exchange_authorization_code("4/abc")


# ==================== authorization_url / status ====================

class TestAuthorizationUrl:

    def test_url_requests_offline_readonly_access(self, unauthenticated_credential, clock):
        manager = TokenManager(unauthenticated_credential, Mock(), clock=clock)

        url = manager.authorization_url()
        parsed = urlparse(url)
        query = parse_qs(parsed.query)

        assert url.startswith(Config.AUTH_URI)
        assert query['client_id'] == ["client-123.apps.googleusercontent.com"]
        assert query['redirect_uri'] == [Config.REDIRECT_URI]
        assert query['response_type'] == ["code"]
        assert query['access_type'] == ["offline"]
        assert query['prompt'] == ["consent"]
        assert query['scope'] == ["https://www.googleapis.com/auth/calendar.readonly"]
        assert 'code_challenge' not in query

    def test_url_requires_client_id(self, clock):
        manager = TokenManager(Credential(), Mock(), clock=clock)

        with pytest.raises(MissingCredentialsError):
            manager.authorization_url()


class TestStatus:

    def test_unauthenticated(self, unauthenticated_credential, clock):
        status = TokenManager(unauthenticated_credential, Mock(), clock=clock).status()

        assert status.authenticated is False
        assert str(status) == "Not authenticated"

    def test_authenticated_reports_expiry(self, fresh_credential, clock):
        status = TokenManager(fresh_credential, Mock(), clock=clock).status()

        assert status.authenticated is True
        assert status.expires_at.isoformat() == "2024-03-15T09:00:00+00:00"
        assert "2024-03-15 09:00:00 UTC" in str(status)
