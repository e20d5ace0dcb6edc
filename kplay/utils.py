import math


def format_time(seconds: float) -> str:
    """Format a playback position for display.

    Args:
        seconds: Position or duration in seconds

    Returns:
        ``m:ss``, or ``h:mm:ss`` from one hour up. Negative or unknown
        values show as ``0:00``.

    Examples:
        >>> format_time(75)
        '1:15'
        >>> format_time(3725)
        '1:02:05'
    """
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        seconds = 0

    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
