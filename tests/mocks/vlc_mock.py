class MockEventType:
    """Mock VLC EventType enum."""

    MediaPlayerPlaying = 260
    MediaPlayerPaused = 261
    MediaPlayerStopped = 262
    MediaPlayerEndReached = 265
    MediaPlayerEncounteredError = 266
    MediaPlayerTimeChanged = 267
    MediaPlayerLengthChanged = 273


class MockEventManager:
    """Mock VLC EventManager for handling events."""

    def __init__(self):
        self.callbacks = {}

    def event_attach(self, event_type, callback):
        """Attach a callback to an event type."""
        self.callbacks[event_type] = callback

    def event_detach(self, event_type):
        """Detach the callback for an event type."""
        self.callbacks.pop(event_type, None)

    def trigger_event(self, event_type, *args, **kwargs):
        """Manually trigger an event (for testing)."""
        if event_type in self.callbacks:
            self.callbacks[event_type](*args, **kwargs)


class MockMedia:
    """Mock VLC Media object."""

    def __init__(self, mrl):
        self.mrl = mrl

    def get_mrl(self):
        return self.mrl


class MockMediaPlayer:
    """Mock VLC MediaPlayer for unit testing.

    Simulates VLC media player behavior without actual playback.
    Provides deterministic responses for time, duration, volume, etc.
    """

    def __init__(self):
        self._media = None
        self._is_playing = False
        self._time = 0  # Current position in milliseconds
        self._length = 180000  # Default 3 minutes in milliseconds
        self._volume = 100
        self._rate = 1.0
        self._play_result = 0
        self._released = False
        self._event_manager = MockEventManager()

    def event_manager(self):
        """Return the event manager."""
        return self._event_manager

    def get_media(self):
        """Get the current media object."""
        return self._media

    def set_media(self, media):
        """Set the media to play."""
        self._media = media
        self._time = 0
        self._is_playing = False

    def play(self):
        """Start playback."""
        if self._play_result == 0:
            self._is_playing = True
        return self._play_result  # VLC returns 0 on success, -1 on error

    def set_pause(self, do_pause):
        """Pause (1) or resume (0) playback."""
        self._is_playing = not do_pause

    def stop(self):
        """Stop playback."""
        self._is_playing = False
        self._time = 0

    def get_time(self):
        """Get current playback time in milliseconds, -1 without media."""
        if self._media is None:
            return -1
        return self._time

    def set_time(self, time_ms):
        """Set playback position in milliseconds."""
        self._time = max(0, min(time_ms, self._length))

    def get_length(self):
        """Get media duration in milliseconds."""
        if self._media is None:
            return 0
        return self._length

    def audio_get_volume(self):
        """Get volume (0-100)."""
        return self._volume

    def audio_set_volume(self, volume):
        """Set volume (0-100)."""
        self._volume = max(0, min(100, volume))
        return 0

    def get_rate(self):
        return self._rate

    def set_rate(self, rate):
        self._rate = rate
        return 0

    def is_playing(self):
        """Check if currently playing."""
        return self._is_playing

    def release(self):
        self._released = True

    # Test helper methods (not part of real VLC API)
    def _set_length(self, length_ms):
        """Set the media length for testing purposes."""
        self._length = length_ms


class MockInstance:
    """Mock VLC Instance for creating media players and media objects."""

    def __init__(self, *args, **kwargs):
        """Initialize mock VLC instance."""
        self._media_player = None
        self._released = False

    def media_player_new(self):
        """Create a new media player."""
        self._media_player = MockMediaPlayer()
        return self._media_player

    def media_new(self, mrl):
        """Create a new media object from a path or URL."""
        return MockMedia(mrl)

    def release(self):
        self._released = True
