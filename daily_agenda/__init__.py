"""Daily Agenda: Google Calendar events for one day, as Markdown."""

__version__ = "0.1.0"
