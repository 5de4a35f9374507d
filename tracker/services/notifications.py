"""
Notification sinks - how a reminder reaches the user.

Supports:
- Log output (fallback, always available)
- An external command (e.g. ``notify-send``), given title and body as arguments

A sink reports success or failure; it never retries.
"""
import logging
import shlex
import subprocess
from typing import List, Protocol

from tracker.config import Settings
from tracker.services.errors import DeliveryFailed

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def deliver(self, title: str, body: str) -> bool:
        """Deliver one notification. Must return promptly."""
        ...


class LoggingNotificationSink:
    """Writes notifications to the log."""

    def deliver(self, title: str, body: str) -> bool:
        logger.info(f"NOTIFICATION {title}: {body.replace(chr(10), ' | ')}")
        return True


class CommandNotificationSink:
    """Runs an external command with the title and body appended as arguments."""

    def __init__(self, command: str, timeout: float = 5.0):
        self.command: List[str] = shlex.split(command)
        if not self.command:
            raise ValueError("Notification command is empty")
        self.timeout = timeout

    def deliver(self, title: str, body: str) -> bool:
        try:
            result = subprocess.run(
                [*self.command, title, body],
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise DeliveryFailed(f"Notification command timed out after {self.timeout}s") from e
        except OSError as e:
            raise DeliveryFailed(f"Could not run notification command: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode(errors="replace").strip()
            logger.warning(f"Notification command exited {result.returncode}: {stderr}")
            return False
        return True


def build_notification_sink(settings: Settings) -> NotificationSink:
    """Pick the sink configured by NOTIFY_COMMAND."""
    if settings.NOTIFY_COMMAND:
        return CommandNotificationSink(settings.NOTIFY_COMMAND, timeout=settings.NOTIFY_TIMEOUT_SECONDS)
    return LoggingNotificationSink()
