"""Unit tests for the eliot logging helpers."""

import io
import logging
import pytest
from eliot.stdlib import EliotHandler
from kplay.logging import (
    HumanReadableDestination,
    controls_logger,
    log_error,
    log_player_action,
    log_queue_operation,
    setup_logging,
)
from unittest.mock import patch


class TestHumanReadableDestination:
    """Test console formatting."""

    @pytest.fixture
    def output(self):
        return io.StringIO()

    @pytest.fixture
    def destination(self, output):
        return HumanReadableDestination(output)

    def test_player_action_with_states(self, destination, output):
        destination({
            "message_type": "player_action",
            "action": "play_pause_pressed",
            "trigger_source": "gui",
            "track": "NewJeans - Ditto",
            "old_state": "paused",
            "new_state": "playing",
        })

        assert output.getvalue() == "[GUI] play_pause_pressed: NewJeans - Ditto (paused → playing)\n"

    def test_player_action_with_description(self, destination, output):
        destination({
            "message_type": "player_action",
            "action": "next_track_selected",
            "trigger_source": "automatic",
            "description": "Playing next: aespa - Drama",
        })

        assert output.getvalue() == "[AUTOMATIC] Playing next: aespa - Drama\n"

    def test_queue_operation(self, destination, output):
        destination({"message_type": "queue_operation", "operation": "clear", "description": "3 tracks"})

        assert output.getvalue() == "[QUEUE] clear: 3 tracks\n"

    def test_error(self, destination, output):
        destination({"message_type": "error_occurred", "error_type": "PlaybackError", "error_message": "rejected"})

        assert output.getvalue() == "[ERROR] PlaybackError: rejected\n"

    def test_skips_action_bookkeeping(self, destination, output):
        destination({"action_type": "seek_operation", "action_status": "started"})

        assert output.getvalue() == ""

    def test_skips_noisy_messages(self, destination, output):
        destination({"message_type": "time_update", "description": "tick"})

        assert output.getvalue() == ""

    def test_skips_messages_without_content(self, destination, output):
        destination({"message_type": "something"})

        assert output.getvalue() == ""


class TestLogHelpers:
    """Test the structured log helpers."""

    def test_log_player_action(self, eliot_messages):
        log_player_action("toggle_shuffle", trigger_source="gui", new_state=True)

        message = eliot_messages[-1]
        assert message["message_type"] == "player_action"
        assert message["action"] == "toggle_shuffle"
        assert message["new_state"] is True

    def test_log_queue_operation(self, eliot_messages):
        log_queue_operation("add", track_id="A")

        message = eliot_messages[-1]
        assert message["message_type"] == "queue_operation"
        assert message["operation"] == "add"
        assert message["track_id"] == "A"

    def test_log_error(self, eliot_messages):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            log_error(controls_logger, e, surface="audio")

        errors = [m for m in eliot_messages if m.get("message_type") == "error_occurred"]
        assert errors[-1]["error_message"] == "boom"
        assert errors[-1]["error_type"] == "RuntimeError"
        assert errors[-1]["surface"] == "audio"


class TestSetupLogging:
    """Test logging setup."""

    @pytest.fixture
    def restore_root_logger(self):
        root = logging.getLogger()
        level, handlers = root.level, list(root.handlers)
        yield root
        root.setLevel(level)
        root.handlers[:] = handlers

    def test_setup_logging(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "kplay.log"

        with patch("kplay.logging.eliot.add_destinations") as add_destinations, patch("kplay.logging.eliot.to_file") as to_file:
            setup_logging("DEBUG", str(log_file))

        destination = add_destinations.call_args[0][0]
        assert isinstance(destination, HumanReadableDestination)

        to_file.assert_called_once()
        log_handle = to_file.call_args[0][0]
        log_handle.close()
        assert log_handle.name == str(log_file)
        assert log_file.parent.is_dir()

        assert restore_root_logger.level == logging.DEBUG
        assert any(isinstance(handler, EliotHandler) for handler in restore_root_logger.handlers)

    def test_setup_logging_defaults_to_stdout_only(self, restore_root_logger):
        with patch("kplay.logging.eliot.add_destinations"), patch("kplay.logging.eliot.to_file") as to_file:
            setup_logging("WARNING")

        to_file.assert_not_called()
        assert restore_root_logger.level == logging.WARNING
