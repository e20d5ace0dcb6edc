import math
import threading
from eliot import start_action
from kplay.config import AUDIO_SKIP_SECONDS, DEFAULT_VOLUME, VOLUME_STEP
from kplay.exceptions import PlaybackError
from kplay.logging import controls_logger, log_error, log_player_action
from kplay.media.element import EventSubscription, MediaElement, MediaEvent
from kplay.models import PlaybackState
from kplay.session import PlaybackSession


class MediaTransport:
    """Bind one media element to the session selection and implement the shared transport controls.

    Subclasses decide which session item they follow (track or video), which
    visibility flag controls their surface and what happens when media ends.
    """

    surface = "media"
    skip_seconds = AUDIO_SKIP_SECONDS

    def __init__(self, session: PlaybackSession, element: MediaElement | None = None):
        self.session = session
        self.element: MediaElement | None = None
        self.loaded_item = None  # Selection whose source is on the element

        self.is_playing = False
        self.current_time = 0.0
        self.duration = 0.0
        self.volume = DEFAULT_VOLUME
        self.is_muted = False
        self.previous_volume = self.volume  # Restored on unmute
        self.state = PlaybackState.IDLE

        self._subscription: EventSubscription | None = None
        self._playback_lock = threading.RLock()  # Reentrant lock for thread-safe playback operations

        if element is not None:
            self.bind(element)
        self._unsubscribe_session = session.subscribe(self._on_session_change)
        self._on_session_change(session)

    # Subclass hooks

    def _selected_item(self, session: PlaybackSession):
        raise NotImplementedError

    def _is_visible(self, session: PlaybackSession) -> bool:
        raise NotImplementedError

    def _source_of(self, item) -> str:
        raise NotImplementedError

    def _on_selection_loaded(self, item) -> None:
        """Called after a new selection was put on the element."""

    def _after_session_change(self, session: PlaybackSession, selection_changed: bool) -> None:
        """Called after every session change, once the selection is loaded."""

    def _handle_ended(self) -> None:
        self._stop_at_end()

    # Element binding

    def bind(self, element: MediaElement) -> None:
        """Drive ``element`` from now on, releasing listeners on any previous one."""
        with self._playback_lock:
            self.unbind()

            self.element = element
            self._subscription = EventSubscription(
                element,
                {
                    MediaEvent.PLAY: self._on_element_play,
                    MediaEvent.PAUSE: self._on_element_pause,
                    MediaEvent.TIME_UPDATE: self._on_time_update,
                    MediaEvent.LOADED_METADATA: self._on_loaded_metadata,
                    MediaEvent.ENDED: self._on_ended,
                    MediaEvent.ERROR: self._on_error,
                },
            )
            element.volume = self.volume

            # Keep the current selection on the new element
            if self.loaded_item is not None:
                self._load(self.loaded_item)

            log_player_action("element_bound", trigger_source="automatic", surface=self.surface)

    def unbind(self) -> None:
        with self._playback_lock:
            if self._subscription is not None:
                self._subscription.close()
                self._subscription = None
            self.element = None
            self.is_playing = False

    def close(self) -> None:
        """Release the element and stop following the session."""
        self.unbind()
        self._unsubscribe_session()

    # Session tracking

    def _on_session_change(self, session: PlaybackSession) -> None:
        with self._playback_lock:
            item = self._selected_item(session)
            selection_changed = item is not self.loaded_item
            if selection_changed:
                self._load(item)

            self._after_session_change(session, selection_changed)

            # A hidden surface stops playing
            if self.is_playing and not self._is_visible(session):
                self.pause()

    def _load(self, item) -> None:
        self.loaded_item = item
        self.current_time = 0.0
        self.duration = 0.0
        self.is_playing = False
        self.state = PlaybackState.LOADED if item is not None else PlaybackState.IDLE

        if self.element is not None:
            self.element.load(self._source_of(item) if item is not None else "")

        self._on_selection_loaded(item)

        log_player_action(
            "source_changed",
            trigger_source="automatic",
            surface=self.surface,
            track=item.display_name if item is not None else "",
            description=f"Loaded {item.display_name}" if item is not None else f"Cleared {self.surface} source",
        )

    # Transport controls

    def toggle_play(self) -> None:
        """Toggle play/pause state."""
        with self._playback_lock:
            log_player_action(
                "play_pause_pressed",
                trigger_source="gui",
                surface=self.surface,
                old_state="playing" if self.is_playing else "paused",
                new_state="paused" if self.is_playing else "playing",
                track=self._track_display(),
            )
            if self.is_playing:
                self.pause()
            else:
                self.play()

    def play(self) -> None:
        """Ask the element to play; is_playing flips when the element reports it."""
        with self._playback_lock, start_action(controls_logger, "play", surface=self.surface):
            if self.loaded_item is None or self.element is None:
                log_player_action(
                    "play_ignored",
                    trigger_source="gui",
                    surface=self.surface,
                    reason="nothing_selected" if self.loaded_item is None else "no_element",
                )
                return

            try:
                self.element.play()
            except PlaybackError as e:
                # Transport stays paused
                log_error(controls_logger, e, surface=self.surface, source=e.source, track=self._track_display())
                return

            log_player_action("playback_requested", trigger_source="gui", surface=self.surface, track=self._track_display())

    def pause(self) -> None:
        with self._playback_lock:
            if self.element is None:
                return
            self.element.pause()
            log_player_action("pause_requested", trigger_source="gui", surface=self.surface, track=self._track_display())

    def seek_to(self, time_seconds: float) -> None:
        """Jump to an absolute position. Clamping is the caller's job."""
        with self._playback_lock, start_action(controls_logger, "seek_operation", surface=self.surface):
            if self.element is None:
                return

            old_time = self.current_time
            self.element.current_time = time_seconds
            # Mirror immediately instead of waiting for the next timeupdate
            self.current_time = time_seconds

            log_player_action(
                "seek_operation",
                trigger_source="gui",
                surface=self.surface,
                old_position=old_time,
                new_position=time_seconds,
                duration=self.duration,
            )

    def seek_fraction(self, fraction: float) -> None:
        """Seek to a fraction (0.0 to 1.0) of the duration, as a progress bar click does."""
        if self.duration <= 0:
            log_player_action("seek_operation_failed", trigger_source="gui", surface=self.surface, reason="no_duration")
            return
        fraction = max(0.0, min(1.0, fraction))
        self.seek_to(fraction * self.duration)

    def skip(self, seconds: float | None = None) -> None:
        """Seek relative to the current position, staying within [0, duration]."""
        if seconds is None:
            seconds = self.skip_seconds
        self.seek_to(max(0.0, min(self.duration, self.current_time + seconds)))

    def set_volume(self, volume: float) -> None:
        """Set volume (0.0 to 1.0)."""
        with self._playback_lock:
            volume = max(0.0, min(1.0, float(volume)))
            self.volume = volume
            if self.element is not None:
                self.element.volume = volume
            if volume > 0:
                self.is_muted = False

    def volume_up(self) -> None:
        self.set_volume(self.volume + VOLUME_STEP)

    def volume_down(self) -> None:
        self.set_volume(self.volume - VOLUME_STEP)

    def toggle_mute(self) -> bool:
        """Mute or restore the volume from before muting.

        Returns:
            New muted state
        """
        with self._playback_lock:
            if self.is_muted:
                self.set_volume(self.previous_volume)
                self.is_muted = False
            else:
                self.previous_volume = self.volume
                self.set_volume(0)
                self.is_muted = True

            log_player_action(
                "toggle_mute",
                trigger_source="gui",
                surface=self.surface,
                new_state="muted" if self.is_muted else "unmuted",
                volume=self.volume,
            )
            return self.is_muted

    # Element events

    def _on_element_play(self) -> None:
        with self._playback_lock:
            self.is_playing = True
            self.state = PlaybackState.PLAYING

    def _on_element_pause(self) -> None:
        with self._playback_lock:
            self.is_playing = False
            if self.state == PlaybackState.PLAYING:
                self.state = PlaybackState.PAUSED

    def _on_time_update(self, position: float) -> None:
        self.current_time = position

    def _on_loaded_metadata(self, duration: float) -> None:
        with self._playback_lock:
            self.duration = duration if duration is not None and math.isfinite(duration) and duration > 0 else 0.0
            if self.state == PlaybackState.LOADED:
                self.state = PlaybackState.READY

    def _on_ended(self) -> None:
        with self._playback_lock:
            log_player_action("track_ended", trigger_source="automatic", surface=self.surface, track=self._track_display())
            self._handle_ended()

    def _on_error(self, message: str) -> None:
        with self._playback_lock:
            log_player_action(
                "media_error",
                trigger_source="automatic",
                surface=self.surface,
                track=self._track_display(),
                description=message,
            )
            self.is_playing = False
            if self.state == PlaybackState.PLAYING:
                self.state = PlaybackState.PAUSED

    def _stop_at_end(self) -> None:
        self.is_playing = False
        self.state = PlaybackState.ENDED
        log_player_action(
            "playback_stopped",
            trigger_source="automatic",
            surface=self.surface,
            stop_reason="end_of_queue",
            track=self._track_display(),
        )

    def _track_display(self) -> str:
        return self.loaded_item.display_name if self.loaded_item is not None else "No track"
