import math
import threading
from kplay.config import DEFAULT_PLAYBACK_RATE, PLAYBACK_RATES, VIDEO_LOAD_TIMEOUT, VIDEO_SKIP_SECONDS
from kplay.controls.transport import MediaTransport
from kplay.logging import log_player_action
from kplay.media.element import MediaElement
from kplay.models import Video
from kplay.session import PlaybackSession


class VideoTransport(MediaTransport):
    """Video surface transport: skip buttons, restart, playback speed and a loading indicator."""

    surface = "video"
    skip_seconds = VIDEO_SKIP_SECONDS

    def __init__(
        self,
        session: PlaybackSession,
        element: MediaElement | None = None,
        autoplay: bool = False,
        load_timeout: float | None = VIDEO_LOAD_TIMEOUT,
    ):
        self.autoplay = autoplay
        self.load_timeout = load_timeout  # None disables the timeout
        self.is_loading = False
        self.playback_rate = DEFAULT_PLAYBACK_RATE
        self._loading_timer: threading.Timer | None = None
        super().__init__(session, element)

    def _selected_item(self, session):
        return session.current_video

    def _is_visible(self, session) -> bool:
        return session.video_visible

    def _source_of(self, video: Video) -> str:
        return video.video_url

    def _on_selection_loaded(self, video: Video | None) -> None:
        self._cancel_loading_timer()
        if video is None:
            self.is_loading = False
            return

        if video.duration:
            self.duration = float(video.duration)
        if self.element is not None:
            self.element.playback_rate = self.playback_rate

        # Spinner until metadata arrives or the timeout gives up on it
        self.is_loading = True
        if self.load_timeout is not None:
            self._loading_timer = threading.Timer(self.load_timeout, self._on_loading_timeout)
            self._loading_timer.daemon = True
            self._loading_timer.start()

    def _after_session_change(self, session, selection_changed: bool) -> None:
        if selection_changed and self.autoplay and self.loaded_item is not None:
            self.play()

    def _cancel_loading_timer(self) -> None:
        if self._loading_timer is not None:
            self._loading_timer.cancel()
            self._loading_timer = None

    def _on_loading_timeout(self) -> None:
        with self._playback_lock:
            self._loading_timer = None
            if self.is_loading:
                self.is_loading = False
                log_player_action(
                    "video_load_timeout",
                    trigger_source="automatic",
                    track=self._track_display(),
                    timeout=self.load_timeout,
                    description=f"Gave up waiting for metadata after {self.load_timeout}s",
                )

    def _on_loaded_metadata(self, duration: float) -> None:
        with self._playback_lock:
            super()._on_loaded_metadata(duration)
            if self.duration > 0:
                self.is_loading = False
                self._cancel_loading_timer()

    def _on_time_update(self, position: float) -> None:
        super()._on_time_update(position)
        # Some sources only report their length once frames are decoding
        if self.element is not None:
            duration = self.element.duration
            if math.isfinite(duration) and duration > 0:
                self.duration = duration

    def restart(self) -> None:
        """Jump back to the start of the video."""
        self.seek_to(0)

    def set_playback_rate(self, rate: float) -> None:
        """Change playback speed to one of PLAYBACK_RATES."""
        if rate not in PLAYBACK_RATES:
            raise ValueError(f"Unsupported playback rate {rate}; expected one of {PLAYBACK_RATES}")

        with self._playback_lock:
            old_rate = self.playback_rate
            self.playback_rate = rate
            if self.element is not None:
                self.element.playback_rate = rate

            log_player_action(
                "playback_rate_changed",
                trigger_source="gui",
                surface=self.surface,
                old_state=str(old_rate),
                new_state=str(rate),
                track=self._track_display(),
            )

    def close(self) -> None:
        self._cancel_loading_timer()
        super().close()
