from tests.mocks.media_mock import MockMediaElement
from tests.mocks.vlc_mock import (
    MockEventManager,
    MockEventType,
    MockInstance,
    MockMedia,
    MockMediaPlayer,
)

__all__ = [
    'MockEventManager',
    'MockEventType',
    'MockInstance',
    'MockMedia',
    'MockMediaElement',
    'MockMediaPlayer',
]
