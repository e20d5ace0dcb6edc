from decouple import config

# Logging
LOG_LEVEL = config('KPLAY_LOG_LEVEL', default='INFO')
LOG_FILE = config('KPLAY_LOG_FILE', default=None)

# Transport behaviour
RESTART_THRESHOLD = config('KPLAY_RESTART_THRESHOLD', default=3.0, cast=float)  # seconds
DEFAULT_VOLUME = config('KPLAY_DEFAULT_VOLUME', default=1.0, cast=float)
VOLUME_STEP = config('KPLAY_VOLUME_STEP', default=0.05, cast=float)
AUDIO_SKIP_SECONDS = config('KPLAY_AUDIO_SKIP_SECONDS', default=5, cast=float)

# Video surface
VIDEO_SKIP_SECONDS = config('KPLAY_VIDEO_SKIP_SECONDS', default=10, cast=float)
VIDEO_LOAD_TIMEOUT = config('KPLAY_VIDEO_LOAD_TIMEOUT', default=5.0, cast=float)  # seconds
PLAYBACK_RATES = (0.5, 0.75, 1.0, 1.25, 1.5, 2.0)
DEFAULT_PLAYBACK_RATE = 1.0
