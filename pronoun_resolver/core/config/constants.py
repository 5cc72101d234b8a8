"""
System Constants and Enumerations

This module defines system-wide constants and enumerations used across
the pronoun resolution package.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic numbers and storage key layouts
- Type-safe enums for stage identifiers
- Easy to update and track changes
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Resolution stages attached to every log entry as the ``stage`` field.

    Format: {PREFIX}.{SEQUENCE}_{DESCRIPTIVE_NAME}
    - RES: public resolve path
    - BATCH: coalesced dispatch and fan-out
    - OVR: override store operations
    - HTTP: remote lookup transport
    - STORE: durable persistence backend

    Examples:
        logger.info("Override hit", stage=Stage.OVERRIDE_LOOKUP, key="123")
    """

    # Resolve path
    OVERRIDE_LOOKUP = "RES.1_OVERRIDE_LOOKUP"
    RESULT_CACHE = "RES.2_RESULT_CACHE"
    ENQUEUE = "RES.3_ENQUEUE"
    CACHE_BYPASS = "RES.4_CACHE_BYPASS"

    # Coalescer / dispatcher
    DISPATCH = "BATCH.1_DISPATCH"
    FANOUT = "BATCH.2_FANOUT"
    FALLBACK = "BATCH.3_FALLBACK"
    SHUTDOWN = "BATCH.4_SHUTDOWN"

    # Overrides
    OVERRIDE_READ = "OVR.1_READ"
    OVERRIDE_WRITE = "OVR.2_WRITE"
    OVERRIDE_CLEAR_ALL = "OVR.3_CLEAR_ALL"

    # Transport
    HTTP_REQUEST = "HTTP.1_REQUEST"
    HTTP_PARSE = "HTTP.2_PARSE"
    HTTP_ERROR = "HTTP.3_ERROR"

    # Persistence
    STORE_CONNECT = "STORE.1_CONNECT"
    STORE_OPERATION = "STORE.2_OPERATION"
    STORE_DISCONNECT = "STORE.3_DISCONNECT"


# ============================================================================
# Persistence Backends
# ============================================================================


class PersistenceBackendType(str, Enum):
    """
    Supported durable persistence backends for overrides.

    MEMORY: process-local dict (tests, ephemeral deployments)
    REDIS: Redis server via redis.asyncio
    """

    MEMORY = "memory"
    REDIS = "redis"


# ============================================================================
# PronounDB API
# ============================================================================

PRONOUNDB_BULK_LOOKUP_PATH = "/api/v1/lookup-bulk"
PRONOUNDB_SOURCE_HEADER = "X-PronounDB-Source"

# ============================================================================
# Storage Key Layout
# ============================================================================

# Override records live at "<prefix>:<key>"; the index of overridden keys
# is a single record so clearing all overrides never scans the store.
OVERRIDE_KEY_PREFIX = "pronoundb-local-override"
OVERRIDE_INDEX_KEY = "pronoundb-local-override-list"

# ============================================================================
# Timing Defaults (seconds)
# ============================================================================

COALESCE_WINDOW_SECONDS = 0.3  # Quiescence interval before a batch is sent
LOOKUP_TIMEOUT_SECONDS = 10.0
LOOKUP_MAX_RETRIES = 2
LOOKUP_RETRY_BASE_DELAY = 0.5
LOOKUP_RETRY_MAX_DELAY = 5.0
