class PlaybackError(Exception):
    """Raised by a media element that refuses to start playback.

    Covers a missing or empty source, unsupported formats and backend
    failures. Transports catch and log it; it never reaches UI callers.
    """

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source
