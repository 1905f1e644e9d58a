# File: daily_agenda/services/service_factory.py

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from daily_agenda.core.config_manager import Config
from daily_agenda.utils.logger import setup_logger
from daily_agenda.services.calendar_service import GoogleCalendarService

logger = setup_logger(__name__)

class ServiceFactory:
    """Factory for creating service instances."""

    @staticmethod
    def create_calendar_service(access_token: str) -> GoogleCalendarService:
        """
        Build a Calendar API client authorized by a bare bearer token.

        Refresh is handled by TokenManager, so the google-auth credentials
        carry no refresh token and never refresh on their own.

        Args:
            access_token: Currently valid OAuth2 access token

        Returns:
            GoogleCalendarService wrapping the discovery resource
        """
        logger.debug("Building Calendar API service")
        creds = Credentials(token=access_token, scopes=Config.GOOGLE_SCOPES)
        resource = build("calendar", "v3", credentials=creds, cache_discovery=False)
        return GoogleCalendarService(resource)
