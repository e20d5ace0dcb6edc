"""MediaElement backed by libVLC through python-vlc."""

import math
import queue
import threading
import vlc
from collections.abc import Callable
from kplay.exceptions import PlaybackError
from kplay.logging import log_error, log_player_action, player_logger
from kplay.media.element import MediaElement, MediaEvent

_STOP = object()


class EventDispatcher:
    """Run scheduled callbacks one at a time, in submission order, on a single daemon thread.

    Stands in for a GUI main loop when there is none: VLC callbacks are
    queued here and handled off VLC's event thread without reordering.
    """

    def __init__(self, name: str = "vlc-events"):
        self._queue = queue.Queue()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def __call__(self, callback: Callable[[], None]) -> None:
        self._queue.put(callback)

    def _run(self) -> None:
        while True:
            callback = self._queue.get()
            try:
                if callback is _STOP:
                    return
                callback()
            except Exception as e:
                # A failing listener must not stop delivery of later events
                log_error(player_logger, e, context="vlc_event_dispatch")
            finally:
                self._queue.task_done()

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def drain(self) -> None:
        """Block until every callback queued so far has run."""
        self._queue.join()

    def stop(self, timeout: float = 1.0) -> None:
        """Finish queued callbacks, then end the thread."""
        if not self._thread.is_alive():
            return
        self._queue.put(_STOP)
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout)


class VlcMediaElement(MediaElement):
    """Drive a VLC MediaPlayer as a MediaElement.

    VLC fires its events on an internal thread and deadlocks if the player is
    touched from inside them, so every event is re-emitted through
    ``schedule``. A GUI passes its main-loop hook (e.g. ``window.after(0, ...)``
    wrapped in a lambda); the default is an EventDispatcher owned by the element
    and stopped in release().
    """

    def __init__(self, instance=None, schedule: Callable[[Callable[[], None]], None] | None = None):
        super().__init__()
        self.instance = instance or vlc.Instance()
        self.media_player = self.instance.media_player_new()
        self._dispatcher = None
        if schedule is None:
            self._dispatcher = EventDispatcher()
            schedule = self._dispatcher
        self.schedule = schedule

        self._vlc_events = {
            vlc.EventType.MediaPlayerPlaying: self._on_vlc_playing,
            vlc.EventType.MediaPlayerPaused: self._on_vlc_paused,
            vlc.EventType.MediaPlayerStopped: self._on_vlc_paused,
            vlc.EventType.MediaPlayerTimeChanged: self._on_vlc_time_changed,
            vlc.EventType.MediaPlayerLengthChanged: self._on_vlc_length_changed,
            vlc.EventType.MediaPlayerEndReached: self._on_vlc_end_reached,
            vlc.EventType.MediaPlayerEncounteredError: self._on_vlc_error,
        }
        event_manager = self.media_player.event_manager()
        for event_type, callback in self._vlc_events.items():
            event_manager.event_attach(event_type, callback)

    def load(self, source: str) -> None:
        self.source = source or ""
        if not self.source:
            self.media_player.set_media(None)
            return

        media = self.instance.media_new(self.source)
        self.media_player.set_media(media)
        log_player_action("media_loaded", trigger_source="vlc", source=self.source)

    def play(self) -> None:
        if self.media_player.get_media() is None:
            raise PlaybackError("No media loaded", source=self.source)
        if self.media_player.play() == -1:
            raise PlaybackError("VLC failed to start playback", source=self.source)

    def pause(self) -> None:
        # pause() toggles in VLC, set_pause(1) only ever pauses
        self.media_player.set_pause(1)

    @property
    def current_time(self) -> float:
        time_ms = self.media_player.get_time()
        return max(0, time_ms) / 1000

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        self.media_player.set_time(int(seconds * 1000))

    @property
    def duration(self) -> float:
        length_ms = self.media_player.get_length()
        if length_ms is None or length_ms <= 0:
            return math.nan
        return length_ms / 1000

    @property
    def volume(self) -> float:
        return self.media_player.audio_get_volume() / 100

    @volume.setter
    def volume(self, value: float) -> None:
        self.media_player.audio_set_volume(round(max(0.0, min(1.0, value)) * 100))

    @property
    def playback_rate(self) -> float:
        return self.media_player.get_rate()

    @playback_rate.setter
    def playback_rate(self, rate: float) -> None:
        self.media_player.set_rate(rate)

    def release(self) -> None:
        """Detach VLC callbacks and release native resources."""
        event_manager = self.media_player.event_manager()
        for event_type in self._vlc_events:
            event_manager.event_detach(event_type)

        # Queued events still read the player, so drain them before releasing it
        if self._dispatcher is not None:
            self._dispatcher.stop()

        self.media_player.stop()
        self.media_player.set_media(None)
        self.media_player.release()
        self.instance.release()
        log_player_action("vlc_cleanup", trigger_source="cleanup", description="VLC resources released")

    def _on_vlc_playing(self, event=None):
        self.schedule(lambda: self.emit(MediaEvent.PLAY))

    def _on_vlc_paused(self, event=None):
        self.schedule(lambda: self.emit(MediaEvent.PAUSE))

    def _on_vlc_time_changed(self, event=None):
        self.schedule(lambda: self.emit(MediaEvent.TIME_UPDATE, self.current_time))

    def _on_vlc_length_changed(self, event=None):
        self.schedule(lambda: self.emit(MediaEvent.LOADED_METADATA, self.duration))

    def _on_vlc_end_reached(self, event=None):
        self.schedule(lambda: self.emit(MediaEvent.ENDED))

    def _on_vlc_error(self, event=None):
        source = self.source
        self.schedule(lambda: self.emit(MediaEvent.ERROR, f"VLC could not play {source}"))
