"""
Constants and configuration settings for WebM conversion.

This module contains the constants used by the conversion pipeline. It includes
the output container settings, fixed encoder flags, the config file location and
schema version, Pushover endpoint settings and the status codes used when
reporting per-file results. Environment overrides are read from the process
environment or a local .env file.
"""

from dotenv import load_dotenv

load_dotenv()

# Run settings
START_DELAY_SECONDS = 5
TICK_INTERVAL_SECONDS = 1.0

# Output settings
CONTAINER_EXTENSION = "webm"
THUMBNAIL_NAME = "background.jpg"
UNOPTIMIZED_SUFFIX = "_unoptimized"

# Fixed encoder settings shared by every resolution profile
AUDIO_CHANNELS = 8
ENCODER_SPEED = 4
LAG_IN_FRAMES = 25

# Required and optional external binaries
FFMPEG_BIN = "ffmpeg"
FFPROBE_BIN = "ffprobe"
THUMBNAILER_BIN = "ffmpegthumbnailer"
MKCLEAN_BIN = "mkclean"

# Config store
CONFIG_FILE_NAME = ".webm-convert.json"
CONFIG_VERSION = 2
CONFIG_PATH_ENV = "WEBM_CONVERT_CONFIG"

# Pushover configuration
PUSHOVER_URL = "https://api.pushover.net/1/messages.json"
PUSHOVER_TIMEOUT = 10
PUSHOVER_ERROR_SOUND = "siren"
PUSHOVER_TOKEN_ENV = "PUSHOVER_TOKEN"
PUSHOVER_USER_ENV = "PUSHOVER_USER"

# Processing status codes
STATUS_DONE = "DONE"
STATUS_FAIL = "FAIL"
STATUS_SKIP = "SKIP"

# Process exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130
