import threading
from collections.abc import Callable, Iterable
from eliot import start_action
from kplay.logging import log_queue_operation, queue_logger
from kplay.models import Track, Video


class PlaybackSession:
    """Holds what is selected to play: current track, queue, current video and surface visibility.

    The session is the single source of truth for the UI surfaces and the
    transports. It is constructed once and passed to every consumer; consumers
    learn about changes through subscribe().
    """

    def __init__(self):
        self.current_track: Track | None = None
        self.queue: list[Track] = []  # In-memory, playback order
        self.audio_visible = False
        self.current_video: Video | None = None
        self.video_visible = False
        self._listeners: list[Callable[["PlaybackSession"], None]] = []
        self._lock = threading.RLock()  # Reentrant lock for thread-safe operations

    def subscribe(self, callback: Callable[["PlaybackSession"], None]) -> Callable[[], None]:
        """Register a change listener.

        Args:
            callback: Called with the session after every mutation

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    def play_track(self, track: Track, queue: Iterable[Track] | None = None) -> None:
        """Select a track for the audio surface.

        Args:
            track: Track to play
            queue: Replacement queue in caller order. When omitted, an empty
                queue is seeded with the track and a non-empty one is kept.
        """
        with start_action(queue_logger, "play_track", track_id=track.id):
            with self._lock:
                self.current_track = track
                if queue is not None:
                    self.queue = list(queue)
                elif not self.queue:
                    self.queue = [track]

                self.audio_visible = True
                self.video_visible = False

                log_queue_operation(
                    "play_track",
                    track_id=track.id,
                    queue_size=len(self.queue),
                    queue_replaced=queue is not None,
                    description=f"Selected {track.display_name}",
                )

            # Listener actions nest under this one
            self._notify()

    def play_video(self, video: Video) -> None:
        """Select a video and switch to the video surface."""
        with start_action(queue_logger, "play_video", video_id=video.id):
            with self._lock:
                self.current_video = video
                self.video_visible = True
                self.audio_visible = False

                log_queue_operation("play_video", video_id=video.id, description=f"Selected video {video.display_name}")

            self._notify()

    def add_to_queue(self, track: Track) -> bool:
        """Append a track unless one with the same id is already queued.

        Returns:
            True if the track was appended
        """
        with start_action(queue_logger, "add_to_queue", track_id=track.id):
            with self._lock:
                if self.index_of(track.id) != -1:
                    log_queue_operation("add_duplicate_ignored", track_id=track.id)
                    return False

                self.queue.append(track)
                log_queue_operation("add", track_id=track.id, queue_size=len(self.queue))

            self._notify()
            return True

    def remove_from_queue(self, track_id: str) -> int:
        """Remove every queued track with the given id.

        The current track is left alone even if it is the one removed.

        Returns:
            Number of tracks removed
        """
        with start_action(queue_logger, "remove_from_queue", track_id=track_id):
            with self._lock:
                before = len(self.queue)
                self.queue = [track for track in self.queue if track.id != track_id]
                removed = before - len(self.queue)

                log_queue_operation("remove", track_id=track_id, removed=removed, queue_size=len(self.queue))

            self._notify()
            return removed

    def clear_queue(self) -> None:
        """Empty the queue, drop the current track and hide the audio surface."""
        with start_action(queue_logger, "clear_queue"):
            with self._lock:
                log_queue_operation("clear", count=len(self.queue))

                self.queue = []
                self.current_track = None
                self.audio_visible = False

            self._notify()

    def close_audio(self) -> None:
        with self._lock:
            self.audio_visible = False
            log_queue_operation("close_audio")
        self._notify()

    def close_video(self) -> None:
        with self._lock:
            self.video_visible = False
            log_queue_operation("close_video")
        self._notify()

    def index_of(self, track_id: str) -> int:
        """Position of the first queued track with this id, or -1."""
        for index, track in enumerate(self.queue):
            if track.id == track_id:
                return index
        return -1

    def get_queue_count(self) -> int:
        return len(self.queue)
