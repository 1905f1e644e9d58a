# File: daily_agenda/core/orchestrator.py
"""
Main orchestrator module for Daily Agenda.
Coordinates token management, event aggregation, document insertion
and user notification for one request at a time.
"""

import datetime
from dataclasses import replace
from pathlib import Path
from typing import Optional, Union

import pytz

from daily_agenda.auth.google_auth import TokenManager
from daily_agenda.core.exceptions import AuthError, FetchError, NoInsertionTargetError
from daily_agenda.core.settings_store import SettingsStore
from daily_agenda.models import AppSettings, Credential, Sources, TokenStatus
from daily_agenda.services.document_sink import DocumentSink
from daily_agenda.services.event_aggregator import EventAggregator
from daily_agenda.services.notifier import Notifier
from daily_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


def today_utc() -> datetime.date:
    """Current calendar day in UTC."""
    return datetime.datetime.now(pytz.utc).date()


class AgendaOrchestrator:
    """
    Top-level operations behind every command.

    Owns the loaded settings and is the only place where failures are
    turned into user notifications.
    """

    def __init__(
        self,
        settings: AppSettings,
        store: SettingsStore,
        sink: DocumentSink,
        notifier: Notifier,
        aggregator: Optional[EventAggregator] = None,
        token_manager: Optional[TokenManager] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            settings: Loaded settings (credential + calendars)
            store: Where settings are persisted
            sink: Receives the rendered agenda
            notifier: Receives status messages
            aggregator: Event aggregator (default: Google Calendar backed)
            token_manager: Token manager (default: bound to settings.credential)
        """
        self.settings = settings
        self.store = store
        self.sink = sink
        self.notifier = notifier
        self.aggregator = aggregator or EventAggregator()
        self.token_manager = token_manager or TokenManager(
            settings.credential,
            persist=self._persist_credential
        )

    def _persist_credential(self, credential: Credential) -> None:
        self.store.save_credential(self.settings, credential)
        self.settings.credential = credential

    def insert_events_for(self, date: Optional[Union[datetime.date, str]] = None) -> bool:
        """
        Fetch a day's events from every calendar and insert them into the sink.

        Args:
            date: Day to fetch (default: today in UTC)

        Returns:
            True if the agenda was inserted or the day had no events
        """
        date = date or today_utc()
        date_str = date if isinstance(date, str) else date.strftime("%Y-%m-%d")
        logger.info(f"Building agenda for {date_str}")

        try:
            access_token = self.token_manager.ensure_valid_access_token()
        except AuthError as e:
            self.notifier.error(str(e))
            return False

        try:
            result = self.aggregator.fetch_and_format(date_str, self.settings.sources, access_token)
        except FetchError as e:
            self.notifier.error(str(e))
            return False

        for failure in result.failures:
            self.notifier.warning(str(failure))

        if not result.has_events:
            self.notifier.info(f"No events on {result.date}")
            return True

        try:
            self.sink.insert(result.text)
        except NoInsertionTargetError as e:
            self.notifier.error(str(e))
            return False

        self.notifier.success(
            f"Inserted {result.event_count} event(s) from {result.source_count} calendar(s)"
        )
        return True

    def authorization_url(self) -> Optional[str]:
        """Consent URL for the first-time OAuth flow, or None if no client id is set."""
        try:
            return self.token_manager.authorization_url()
        except AuthError as e:
            self.notifier.error(str(e))
            return None

    def exchange_code(self, code: str) -> bool:
        """Complete OAuth setup with the code pasted from the browser."""
        if not code.strip():
            self.notifier.error("Authorization code is empty")
            return False

        try:
            self.token_manager.exchange_authorization_code(code)
        except AuthError as e:
            self.notifier.error(str(e))
            return False

        self.notifier.success("OAuth setup complete! You can now use the calendar commands.")
        return True

    def status(self) -> TokenStatus:
        return self.token_manager.status()

    def set_client(self, client_id: str, client_secret: str) -> None:
        """Store new OAuth client identity, keeping existing tokens."""
        credential = replace(
            self.token_manager.credential,
            client_id=client_id.strip(),
            client_secret=client_secret.strip(),
        )
        self._persist_credential(credential)
        self.token_manager.credential = credential
        self.notifier.success("OAuth client saved")

    def update_sources(self, sources: Sources) -> None:
        """Persist a new calendar list produced by the source list operations."""
        updated = replace(self.settings, sources=sources)
        self.store.save(updated)
        self.settings = updated
        logger.info(f"Calendar list saved ({len(sources)} calendar(s))")


class OrchestratorFactory:
    """Factory for creating AgendaOrchestrator instances with dependency injection."""

    @staticmethod
    def create(
        sink: DocumentSink,
        notifier: Notifier,
        settings_path: Optional[Path] = None
    ) -> AgendaOrchestrator:
        """
        Load settings and wire up a ready-to-run orchestrator.

        Raises:
            ConfigurationError: If the settings file cannot be read
        """
        logger.debug("Creating AgendaOrchestrator via factory")
        store = SettingsStore(settings_path)
        settings = store.load()
        return AgendaOrchestrator(settings, store, sink, notifier)
