"""
Constants and configuration defaults for pagefeeds.

Centralized location for magic numbers and configuration constants.
"""

# ============================================================================
# HTTP Configuration
# ============================================================================

CONNECT_TIMEOUT = 10  # seconds
REQUEST_TIMEOUT = 30  # seconds, whole request

HTTP_SCHEMES = ("http", "https")
FILE_SCHEME = "file"

# ============================================================================
# Feed Configuration
# ============================================================================

DEFAULT_MIME_TYPE = "application/octet-stream"

# "When an enclosure's size cannot be determined, a publisher should use a
# length of 0." https://www.rssboard.org/rss-profile#element-channel-item-enclosure
UNKNOWN_ENCLOSURE_LENGTH = "0"

RSS_VERSION = "2.0"

# ============================================================================
# Date Configuration
# ============================================================================

DATE_KIND_DATE = "Date"
DATE_KIND_DATETIME = "DateTime"
VALID_DATE_KINDS = [DATE_KIND_DATE, DATE_KIND_DATETIME]

# ============================================================================
# File System Configuration
# ============================================================================

APP_NAME = "pagefeeds"
CONFIG_FILENAME = "feeds.yaml"
CACHE_SUFFIX = ".yaml"

# ============================================================================
# Environment
# ============================================================================

LOG_ENV_VAR = "PAGEFEEDS_LOG"
DEFAULT_LOG_LEVEL = "info"
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

HTTP_PROXY_ENV_VAR = "http_proxy"
HTTPS_PROXY_ENV_VAR = "HTTPS_PROXY"


def is_valid_date_kind(kind: str) -> bool:
    """Check if a date kind name is valid (case-insensitive)."""
    return kind.lower() in [k.lower() for k in VALID_DATE_KINDS]
