"""Media elements the transports drive.

- element: MediaElement base class, MediaEvent names and EventSubscription
- vlc_element: libVLC-backed element (imported explicitly, it loads libvlc)
"""

from kplay.media.element import EventSubscription, MediaElement, MediaEvent

__all__ = [
    'EventSubscription',
    'MediaElement',
    'MediaEvent',
]
