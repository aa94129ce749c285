"""
Constants used across the SDK.
"""

SDK_VERSION = "1.0.0"

# Identifies this client to the Discovery Service
USER_AGENT = f"fareplay-sdk-python/{SDK_VERSION}"

# Default Discovery Service URL
DEFAULT_DISCOVERY_URL = "https://discovery.fareplay.io"

# Default heartbeat interval (milliseconds)
DEFAULT_HEARTBEAT_INTERVAL = 60000  # 1 minute

# Default HTTP timeout per attempt (milliseconds)
DEFAULT_HTTP_TIMEOUT = 30000  # 30 seconds

# Default retry configuration
DEFAULT_RETRIES = 3
DEFAULT_RETRY_DELAY = 1000  # 1 second, multiplied by attempt number

# Field that carries the base58 signature in signed payloads
SIGNATURE_FIELD = "signature"

# Raw byte lengths for Ed25519 material
PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 64
SIGNATURE_LENGTH = 64
