"""Transport controllers for the audio and video surfaces.

All classes are re-exported at the package level.
"""

from kplay.controls.audio import AudioTransport
from kplay.controls.transport import MediaTransport
from kplay.controls.video import VideoTransport

__all__ = [
    'AudioTransport',
    'MediaTransport',
    'VideoTransport',
]
