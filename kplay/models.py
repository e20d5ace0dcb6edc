"""Catalog item and transport state models."""

from enum import Enum
from pydantic import BaseModel, field_validator


class Track(BaseModel):
    """A playable audio catalog item."""

    id: str
    title: str
    artist: str
    album: str | None = None
    duration: float | None = None  # seconds, may be unknown until metadata loads
    cover_url: str | None = None
    audio_url: str = ""

    @field_validator("artist", mode="before")
    @classmethod
    def join_artists(cls, value):
        if isinstance(value, (list, tuple)):
            return ", ".join(str(name) for name in value)
        return value

    @field_validator("album", mode="before")
    @classmethod
    def album_title(cls, value):
        # Catalog rows sometimes embed the album record instead of its title
        if isinstance(value, dict):
            return value.get("title")
        return value

    @property
    def is_playable(self) -> bool:
        return bool(self.audio_url)

    @property
    def display_name(self) -> str:
        return f"{self.artist or 'Unknown'} - {self.title or 'Unknown'}"


class Video(BaseModel):
    """A playable video catalog item."""

    id: str
    title: str
    artist: str
    duration: float = 0
    thumbnail_url: str | None = None
    video_url: str = ""

    @property
    def is_playable(self) -> bool:
        return bool(self.video_url)

    @property
    def display_name(self) -> str:
        return f"{self.artist or 'Unknown'} - {self.title or 'Unknown'}"


class RepeatMode(str, Enum):
    OFF = "off"
    ONE = "one"
    ALL = "all"

    def next(self) -> "RepeatMode":
        """Return the successor in the off -> one -> all -> off cycle."""
        modes = list(RepeatMode)
        return modes[(modes.index(self) + 1) % len(modes)]


class PlaybackState(str, Enum):
    IDLE = "idle"  # nothing selected
    LOADED = "loaded"  # source assigned, duration unknown
    READY = "ready"  # duration known
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"
