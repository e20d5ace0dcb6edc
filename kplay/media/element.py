"""Event-emitting media element that transports drive."""

import math
from collections import defaultdict
from collections.abc import Callable
from enum import Enum


class MediaEvent(str, Enum):
    PLAY = "play"
    PAUSE = "pause"
    TIME_UPDATE = "timeupdate"  # args: position in seconds
    LOADED_METADATA = "loadedmetadata"  # args: duration in seconds
    ENDED = "ended"
    ERROR = "error"  # args: message


class MediaElement:
    """One playable media surface.

    Subclasses implement the playback primitives against a real backend;
    the listener registry is shared. Positions and durations are seconds,
    volume is 0.0-1.0.
    """

    def __init__(self):
        self._listeners: dict[MediaEvent, list[Callable]] = defaultdict(list)
        self.source = ""

    def add_listener(self, event: MediaEvent, callback: Callable) -> None:
        self._listeners[MediaEvent(event)].append(callback)

    def remove_listener(self, event: MediaEvent, callback: Callable) -> None:
        listeners = self._listeners[MediaEvent(event)]
        if callback in listeners:
            listeners.remove(callback)

    def listener_count(self, event: MediaEvent | None = None) -> int:
        if event is None:
            return sum(len(listeners) for listeners in self._listeners.values())
        return len(self._listeners[MediaEvent(event)])

    def emit(self, event: MediaEvent, *args) -> None:
        """Deliver an event to every registered listener."""
        for callback in list(self._listeners[MediaEvent(event)]):
            callback(*args)

    def load(self, source: str) -> None:
        """Attach a new source. An empty string detaches the current one."""
        raise NotImplementedError

    def play(self) -> None:
        """Start playback, raising PlaybackError if the element refuses."""
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    @property
    def current_time(self) -> float:
        raise NotImplementedError

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        raise NotImplementedError

    @property
    def duration(self) -> float:
        """Media length in seconds, nan while unknown."""
        return math.nan

    @property
    def volume(self) -> float:
        raise NotImplementedError

    @volume.setter
    def volume(self, value: float) -> None:
        raise NotImplementedError

    @property
    def playback_rate(self) -> float:
        raise NotImplementedError

    @playback_rate.setter
    def playback_rate(self, rate: float) -> None:
        raise NotImplementedError


class EventSubscription:
    """A fixed set of listeners attached to one element until closed.

    Usable as a context manager. Closing twice is harmless.
    """

    def __init__(self, element: MediaElement, handlers: dict[MediaEvent, Callable]):
        self.element = element
        self.handlers = dict(handlers)
        self.closed = False
        for event, callback in self.handlers.items():
            element.add_listener(event, callback)

    def close(self) -> None:
        if self.closed:
            return
        for event, callback in self.handlers.items():
            self.element.remove_listener(event, callback)
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
