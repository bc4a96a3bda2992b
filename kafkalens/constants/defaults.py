"""Default values for settings.

All default values used in AppSettings model and validation fallback values.
"""

from typing import Final

# ============================================================================
# Backend defaults
# ============================================================================

BACKEND_COMMAND_DEFAULT: Final = "kafkalens-backend"

# ============================================================================
# Topic view defaults
# ============================================================================

DEFAULT_QUERY: Final = (
    "SELECT partition, offset, timestamp, key, payload\n"
    "FROM {:topic}\n"
    "ORDER BY timestamp desc LIMIT {:limit} OFFSET {:offset}\n"
)
PAGE_SIZE_DEFAULT: Final = 20

# ============================================================================
# Cache defaults
# ============================================================================

# 0 keeps every navigation cache entry for the whole session
CACHE_MAX_ENTRIES_DEFAULT: Final = 0

# ============================================================================
# Logging defaults
# ============================================================================

LOG_LEVELS: Final = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_LEVEL_DEFAULT: Final = "INFO"
LOG_FILE_DEFAULT: Final = "kafkalens.log"

__all__ = [
    "BACKEND_COMMAND_DEFAULT",
    "CACHE_MAX_ENTRIES_DEFAULT",
    "DEFAULT_QUERY",
    "LOG_FILE_DEFAULT",
    "LOG_LEVEL_DEFAULT",
    "LOG_LEVELS",
    "PAGE_SIZE_DEFAULT",
]
