"""
Exception classes for Daily Agenda.
"""


class AgendaError(Exception):
    """Base exception for all Daily Agenda errors."""
    pass


class ConfigurationError(AgendaError):
    """Raised when the settings file is unreadable or invalid."""
    pass


class AuthError(AgendaError):
    """Base exception for OAuth2 token failures."""
    pass


class NotAuthenticatedError(AuthError):
    """Raised when no refresh token is stored."""

    def __init__(self, message: str = "No refresh token. Go to settings and complete OAuth setup."):
        super().__init__(message)


class RefreshRejectedError(AuthError):
    """Raised when the token endpoint returns no access token on refresh."""

    def __init__(self, message: str = "Failed to refresh token. Check your OAuth credentials."):
        super().__init__(message)


class ExchangeRejectedError(AuthError):
    """Raised when the authorization-code exchange returns no refresh token."""

    def __init__(self, message: str = "Failed to get refresh token. Check your code and credentials."):
        super().__init__(message)


class MissingCredentialsError(AuthError):
    """Raised when the OAuth client id or secret is absent."""

    def __init__(self, message: str = "Client ID and Secret are required"):
        super().__init__(message)


class TransportFailureError(AuthError):
    """Raised when the token endpoint cannot be reached or answers garbage."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Token endpoint error: {detail}")


class FetchError(AgendaError):
    """Base exception for agenda aggregation failures."""
    pass


class NoSourcesConfiguredError(FetchError):
    """Raised when no calendar sources are configured."""

    def __init__(self, message: str = "No calendars configured. Add at least one calendar source."):
        super().__init__(message)


class NoInsertionTargetError(FetchError):
    """Raised when the document sink has nowhere to put the agenda."""

    def __init__(self, message: str = "No active note open"):
        super().__init__(message)
