"""Playback core for the kplay streaming app.

- session: PlaybackSession, the shared selection/queue/visibility store
- controls: AudioTransport and VideoTransport driving one media element each
- media: MediaElement abstraction and the libVLC-backed element
- models: Track, Video, RepeatMode, PlaybackState
"""

from kplay.controls import AudioTransport, MediaTransport, VideoTransport
from kplay.exceptions import PlaybackError
from kplay.models import PlaybackState, RepeatMode, Track, Video
from kplay.session import PlaybackSession

__version__ = "0.1.0"

__all__ = [
    'AudioTransport',
    'MediaTransport',
    'PlaybackError',
    'PlaybackSession',
    'PlaybackState',
    'RepeatMode',
    'Track',
    'Video',
    'VideoTransport',
]
