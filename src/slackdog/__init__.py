"""SlackDog: pending-thread tracking and reminders for Slack."""

__version__ = "0.1.0"
