"""All magic values live here — no inline literals anywhere else."""

# Providers
PROVIDER_REST = "rest"
PROVIDER_WHISPER = "whisper"
PROVIDER_MOCK = "mock"
PROVIDERS = (PROVIDER_REST, PROVIDER_WHISPER, PROVIDER_MOCK)

# REST provider (Google Speech-to-Text v1 request/response shape)
DEFAULT_REST_API_URL = "https://speech.googleapis.com/v1/speech:recognize"
REST_AUTH_SCHEME = "Bearer"

# Whisper provider
WHISPER_MODEL = "whisper-1"
WHISPER_RESPONSE_FORMAT = "verbose_json"
WHISPER_FILENAME_PREFIX = "upload"

# Mock provider
MOCK_SEGMENTS = ("(mock) simulated transcript.",)

# Payload validation
DEFAULT_MAX_PAYLOAD_BYTES = 25 * 1024 * 1024
DEFAULT_ALLOWED_MIME_TYPES = (
    "audio/wav,"
    "audio/x-wav,"
    "audio/wave,"
    "audio/x-flac,"
    "audio/flac,"
    "audio/mpeg,"
    "audio/ogg,"
    "audio/webm"
)

# MIME type → provider encoding name. Unlisted types leave encoding unset.
MIME_ENCODINGS = {
    "audio/wav": "LINEAR16",
    "audio/x-wav": "LINEAR16",
    "audio/wave": "LINEAR16",
    "audio/x-flac": "FLAC",
    "audio/flac": "FLAC",
    "audio/mpeg": "MP3",
    "audio/ogg": "OGG_OPUS",
    "audio/webm": "WEBM_OPUS",
}

# File extension handed to Whisper so it can sniff the container.
MIME_EXTENSIONS = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/wave": "wav",
    "audio/x-flac": "flac",
    "audio/flac": "flac",
    "audio/mpeg": "mp3",
    "audio/ogg": "ogg",
    "audio/webm": "webm",
}

# Orchestration defaults
DEFAULT_LANGUAGE = "en-US"
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_BASE_DELAY: float = 0.5
DEFAULT_RETRY_MAX_DELAY: float = 4.0
DEFAULT_REQUEST_TIMEOUT: float = 30.0
DEFAULT_MAX_CONCURRENCY = 4
SEGMENT_SEPARATOR = "\n"

# Gateway
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
ROUTE_TRANSCRIBE = "/transcribe"
ROUTE_HEALTH = "/healthz"
# How often an in-flight request checks whether its client is still connected.
DISCONNECT_POLL_INTERVAL: float = 0.5

# Log messages
MSG_SERVER_STARTING = "Starting transcription gateway on %s:%s (provider: %s)"
MSG_DISPATCH = "→ %s attempt %d/%d (%d bytes, %s)"
MSG_PROVIDER_FAILED = "✗ %s failed on attempt %d: %s"
MSG_TRANSCRIBED = "✓ Transcribed %d segment(s) via %s (%.1fs, %d attempt(s))"
MSG_EMPTY_TRANSCRIPT = "Provider %s returned no segments — no speech detected or unusable audio"
MSG_PAYLOAD_REJECTED = "Rejected upload: %s"
MSG_TIMEOUT = "Provider call timed out after %ss"
MSG_CLIENT_DISCONNECTED = "Client disconnected — cancelling in-flight transcription"
MSG_SHUTDOWN = "Closing %s transcription client"

# User-facing error text
ERR_EMPTY_PAYLOAD = "Uploaded audio is empty"
ERR_UNSUPPORTED_FORMAT = "Unsupported audio type: %s"
ERR_PAYLOAD_TOO_LARGE = "Uploaded audio is %d bytes, limit is %d"
ERR_EMPTY_TRANSCRIPT = "No speech could be recognized in the uploaded audio"
ERR_PROVIDER_UNAUTHORIZED = "Transcription provider rejected our credentials"
ERR_PROVIDER_RATE_LIMITED = "Transcription provider is rate limiting requests — try again later"
ERR_PROVIDER_UNAVAILABLE = "Transcription provider is unavailable — try again later"
ERR_PROVIDER_MALFORMED = "Transcription provider returned an unreadable response"
ERR_PROVIDER_UNKNOWN = "Transcription failed"
