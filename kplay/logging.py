"""
Logging configuration for kplay using eliot.

This module provides structured logging for the playback core using eliot,
which provides context-aware logging with support for nested actions and
structured data.
"""

import eliot
import logging
import sys
from eliot import log_message, write_traceback
from eliot.stdlib import EliotHandler
from pathlib import Path


class HumanReadableDestination:
    """Destination that formats logs in a human-readable format."""

    # Too noisy to print on every tick
    skip_messages = {
        "time_update",
        "session_changed",
    }

    def __init__(self, file):
        self.file = file

    def __call__(self, message):
        """Format and write log message."""
        # Skip internal eliot action start/status messages
        if message.get("action_type") and not message.get("message_type"):
            return

        msg_type = message.get("message_type", "")
        if msg_type in self.skip_messages:
            return

        action = message.get("action", message.get("operation", msg_type))
        description = message.get("description", "")
        trigger = message.get("trigger_source", "")

        if msg_type == "player_action":
            track = message.get("track", "")
            old_state = message.get("old_state", "")
            new_state = message.get("new_state", "")
            prefix = f"[{trigger.upper()}] " if trigger else ""

            if track and old_state and new_state:
                output = f"{prefix}{action}: {track} ({old_state} → {new_state})"
            elif description:
                output = f"{prefix}{description}"
            elif track:
                output = f"{prefix}{action}: {track}"
            else:
                output = f"{prefix}{action}"

        elif msg_type == "queue_operation":
            output = f"[QUEUE] {action}"
            if description:
                output += f": {description}"

        elif msg_type == "error_occurred":
            output = f"[ERROR] {message.get('error_type', '')}: {message.get('error_message', '')}"

        elif description:
            output = description
        elif "message" in message:
            output = message["message"]
        else:
            return

        if output and output.strip():
            self.file.write(output + "\n")
            self.file.flush()


def setup_logging(log_level: str = None, log_file: str = None) -> None:
    """
    Set up eliot logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to KPLAY_LOG_LEVEL.
        log_file: Optional file path to write JSON logs to (always logs to stdout as well).
            Defaults to KPLAY_LOG_FILE.
    """
    from kplay.config import LOG_FILE, LOG_LEVEL

    log_level = log_level or LOG_LEVEL
    log_file = log_file or LOG_FILE

    eliot.add_destinations(HumanReadableDestination(sys.stdout))

    # Raw JSON for machine parsing
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        eliot.to_file(open(log_file, "a"))

    # Route stdlib logging through eliot
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.addHandler(EliotHandler())

    log_message(
        message_type="logging_setup", log_level=log_level, log_file=log_file or "stdout", message="Eliot logging configured"
    )


def get_logger(name: str):
    """
    Get an eliot logger instance for a specific component.

    The returned Logger is meant for start_action() contexts; use
    log_message() (or the helpers below) to emit messages.

    Args:
        name: Component name

    Returns:
        Eliot Logger instance
    """
    from eliot import Logger

    return Logger()


player_logger = get_logger("kplay_player")
queue_logger = get_logger("kplay_queue")
controls_logger = get_logger("kplay_controls")


def log_player_action(action: str, **context):
    """
    Log player actions with context.

    Args:
        action: Player action (play, pause, next, previous, etc.)
        **context: Additional context data
    """
    log_message(message_type="player_action", action=action, **context)


def log_queue_operation(operation: str, **context):
    """
    Log queue and session operations with context.

    Args:
        operation: Queue operation (add, remove, clear, etc.)
        **context: Additional context data
    """
    log_message(message_type="queue_operation", operation=operation, **context)


def log_error(logger: eliot.Logger, error: Exception, **context):
    """
    Log errors with full context and traceback.

    Must be called from inside the except block that caught the error.

    Args:
        logger: Eliot logger instance
        error: Exception that occurred
        **context: Additional context data
    """
    write_traceback(logger, exc_info=sys.exc_info())
    log_message(message_type="error_occurred", error_message=str(error), error_type=type(error).__name__, **context)
