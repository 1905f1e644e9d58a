"""
First-run setup wizard for Daily Agenda.
Collects the OAuth client, walks through Google consent, and picks calendars.
"""

import sys
import webbrowser
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from daily_agenda.core.config_manager import Config
from daily_agenda.core.orchestrator import AgendaOrchestrator, OrchestratorFactory
from daily_agenda.models import add_source
from daily_agenda.services.document_sink import StdoutSink
from daily_agenda.services.notifier import ConsoleNotifier
from daily_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


def configure_client(orchestrator: AgendaOrchestrator) -> bool:
    """
    Ask for the OAuth client id and secret unless both are already stored.

    Returns:
        True if a client is configured afterwards
    """
    credential = orchestrator.settings.credential
    if credential.has_client:
        choice = input(f"Existing client found ({credential.client_id}). Reconfigure? (y/N): ").lower()
        if choice != 'y':
            return True

    print("Create an OAuth client (type: Desktop app) in Google Cloud Console:")
    print("https://console.cloud.google.com/apis/credentials\n")

    client_id = input("Client ID: ").strip()
    client_secret = input("Client Secret: ").strip()

    if not client_id or not client_secret:
        print("Client ID and Secret are required.")
        return False

    orchestrator.set_client(client_id, client_secret)
    return True


def authenticate(orchestrator: AgendaOrchestrator) -> bool:
    """
    Open the consent page and exchange the pasted code.

    Returns:
        True if a refresh token is stored afterwards
    """
    if orchestrator.settings.credential.is_authenticated:
        choice = input("Already authenticated. Re-authenticate? (y/N): ").lower()
        if choice != 'y':
            return True

    url = orchestrator.authorization_url()
    if not url:
        return False

    print("\nOpening Google login in your browser. If nothing opens, visit:")
    print(url)
    webbrowser.open(url)

    code = input("\nPaste the authorization code: ").strip()
    return orchestrator.exchange_code(code)


def configure_calendars(orchestrator: AgendaOrchestrator) -> None:
    """Let the user add calendars beyond the ones already configured."""
    sources = orchestrator.settings.sources
    print("\nConfigured calendars:")
    for source in sources:
        label = f" [{source.label}]" if source.label else ""
        print(f"  {source.order}: {source.id}{label}")

    while True:
        calendar_id = input("\nAdd a calendar ID (blank to finish): ").strip()
        if not calendar_id:
            break
        label = input("Label shown next to its events (optional): ").strip()
        try:
            sources = add_source(sources, calendar_id, label)
        except ValueError as e:
            print(e)
            continue

    if sources != orchestrator.settings.sources:
        orchestrator.update_sources(sources)


def main() -> int:
    """Main setup wizard."""
    print("Setting up Daily Agenda...")
    print("="*60)
    logger.info("Starting setup wizard")

    orchestrator = OrchestratorFactory.create(StdoutSink(), ConsoleNotifier())
    print(f"Settings file: {orchestrator.store.path}")

    # Step 1: OAuth client
    print("\nStep 1: OAuth Client")
    if not configure_client(orchestrator):
        return 1

    # Step 2: Google consent
    print("\nStep 2: Google Authentication")
    if not authenticate(orchestrator):
        print("Google authentication failed.")
        return 1

    # Step 3: Calendars
    print("\nStep 3: Calendars")
    configure_calendars(orchestrator)

    # Final verification
    print("\nStep 4: Verification")
    problems = Config.validate(orchestrator.settings)
    if problems:
        print("="*60)
        print("Setup completed with some warnings")
        print("="*60)
        for problem in problems:
            print(f"  - {problem}")
        return 1

    logger.info("Setup completed successfully")
    print("="*60)
    print("Setup complete!")
    print("="*60)
    print("\nYou can now run: daily-agenda fetch --note <path-to-note.md>")
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nSetup cancelled.")
        sys.exit(1)
    except Exception as e:
        print(f"\nUnexpected error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
