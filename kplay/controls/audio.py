import random
from eliot import start_action
from kplay.config import AUDIO_SKIP_SECONDS, RESTART_THRESHOLD
from kplay.controls.transport import MediaTransport
from kplay.logging import controls_logger, log_player_action
from kplay.media.element import MediaElement
from kplay.models import RepeatMode, Track
from kplay.session import PlaybackSession


class AudioTransport(MediaTransport):
    """Audio surface transport: queue navigation, shuffle, repeat and auto-advance.

    Follows ``session.current_track``. Navigation never edits the queue; it
    only picks which queued track the session should select next.
    """

    surface = "audio"
    skip_seconds = AUDIO_SKIP_SECONDS

    def __init__(self, session: PlaybackSession, element: MediaElement | None = None, rng: random.Random | None = None):
        self.is_shuffled = False
        self.repeat_mode = RepeatMode.OFF
        self.current_index = 0  # Position of the current track in the queue
        self.rng = rng or random.Random()
        self._autoplay_on_load = False
        super().__init__(session, element)

    def _selected_item(self, session):
        return session.current_track

    def _is_visible(self, session) -> bool:
        return session.audio_visible

    def _source_of(self, track: Track) -> str:
        return track.audio_url

    def _on_selection_loaded(self, track: Track | None) -> None:
        # Catalog duration is shown until the element reports its own
        if track is not None and track.duration:
            self.duration = float(track.duration)

    def _after_session_change(self, session, selection_changed: bool) -> None:
        self._sync_current_index(session)
        if selection_changed and self._autoplay_on_load:
            self._autoplay_on_load = False
            self.play()

    def _sync_current_index(self, session) -> None:
        """Recompute current_index by id; keep the old value when the track is not queued."""
        if session.current_track is None or not session.queue:
            return
        index = session.index_of(session.current_track.id)
        if index != -1:
            self.current_index = index

    def _is_last_in_queue(self) -> bool:
        return self.current_index >= len(self.session.queue) - 1

    def next(self, autoplay: bool | None = None) -> None:
        """Select the next queued track.

        Sequential order wraps to the start regardless of repeat mode. With
        shuffle on, any queued track may come next, the current one included.

        Args:
            autoplay: Start the new track. Defaults to keep playing if playing.
        """
        with self._playback_lock, start_action(controls_logger, "next_track"):
            queue = self.session.queue
            if not queue:
                log_player_action(
                    "next_song_no_queue",
                    trigger_source="gui",
                    reason="queue_empty",
                    description="Next pressed but queue is empty",
                )
                return

            if self.is_shuffled:
                next_index = self.rng.randrange(len(queue))
            elif self.current_index < len(queue) - 1:
                next_index = self.current_index + 1
            else:
                next_index = 0

            track = queue[next_index]
            log_player_action(
                "next_track_selected",
                trigger_source="gui" if autoplay is None else "automatic",
                current_track=self._track_display(),
                next_track=track.display_name,
                next_index=next_index,
                shuffled=self.is_shuffled,
                description=f"Playing next: {track.display_name}",
            )
            self._navigate_to(track, self.is_playing if autoplay is None else autoplay)

    def previous(self, autoplay: bool | None = None) -> None:
        """Restart the current track if past the threshold, otherwise select the previous one."""
        with self._playback_lock, start_action(controls_logger, "previous_track"):
            queue = self.session.queue
            if not queue:
                log_player_action(
                    "previous_song_no_queue",
                    trigger_source="gui",
                    reason="queue_empty",
                    description="Previous pressed but queue is empty",
                )
                return

            if self.current_time > RESTART_THRESHOLD:
                log_player_action(
                    "previous_restart",
                    trigger_source="gui",
                    track=self._track_display(),
                    position=self.current_time,
                    description=f"Restarting {self._track_display()}",
                )
                self.seek_to(0)
                return

            prev_index = self.current_index - 1 if self.current_index > 0 else len(queue) - 1
            if not 0 <= prev_index < len(queue):
                # current_index went stale after removals
                log_player_action("previous_song_no_track", trigger_source="gui", reason="index_out_of_range", index=prev_index)
                return

            track = queue[prev_index]
            log_player_action(
                "previous_track_selected",
                trigger_source="gui",
                current_track=self._track_display(),
                previous_track=track.display_name,
                previous_index=prev_index,
                description=f"Playing previous: {track.display_name}",
            )
            self._navigate_to(track, self.is_playing if autoplay is None else autoplay)

    def play_from_queue(self, track: Track) -> None:
        """Select a queued track, keeping the queue as it is."""
        with self._playback_lock:
            self._navigate_to(track, self.is_playing)

    def _navigate_to(self, track: Track, autoplay: bool) -> None:
        reselected = track is self.loaded_item
        self._autoplay_on_load = autoplay and not reselected
        try:
            self.session.play_track(track, self.session.queue)
        finally:
            self._autoplay_on_load = False

        if reselected:
            # Same selection, e.g. a one-track queue: restart instead of reloading
            self.seek_to(0)
            if autoplay:
                self.play()

    def toggle_shuffle(self) -> bool:
        """Toggle shuffle mode. The queue order is left untouched.

        Returns:
            New shuffle state
        """
        with start_action(controls_logger, "toggle_shuffle"):
            old_state = self.is_shuffled
            self.is_shuffled = not old_state
            log_player_action(
                "toggle_shuffle",
                trigger_source="gui",
                old_state=old_state,
                new_state=self.is_shuffled,
                description=f"Shuffle mode {'enabled' if self.is_shuffled else 'disabled'}",
            )
            return self.is_shuffled

    def toggle_repeat(self) -> RepeatMode:
        """Advance repeat mode through off -> one -> all -> off.

        Returns:
            New repeat mode
        """
        with start_action(controls_logger, "toggle_repeat"):
            old_mode = self.repeat_mode
            self.repeat_mode = old_mode.next()
            log_player_action(
                "toggle_repeat",
                trigger_source="gui",
                old_state=old_mode.value,
                new_state=self.repeat_mode.value,
                description=f"Repeat mode {self.repeat_mode.value}",
            )
            return self.repeat_mode

    def _handle_ended(self) -> None:
        if self.repeat_mode == RepeatMode.ONE:
            self.seek_to(0)
            self.play()
        elif self.repeat_mode == RepeatMode.ALL or not self._is_last_in_queue():
            self.next(autoplay=True)
        else:
            self._stop_at_end()
