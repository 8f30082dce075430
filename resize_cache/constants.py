"""Package-wide constants.

Centralizes the cache layout and hashing values so the key format stays
stable across releases.
"""

# Cache layout
# ⚠️ Changing these invalidates every existing cache entry
CACHE_DIR = "cache/resize/"  # Relative to the site/root directory
HASH_LENGTH = 32  # Hex chars kept from the SHA-256 digest (128 bits)

# Key derivation
PARAM_SEPARATOR = ","  # Joins transform params before slugging
HASH_CHUNK_SIZE = 64 * 1024  # Bytes read per iteration when hashing sources

# Temporary artifacts written by producers before the atomic rename
TEMP_SUFFIX = ".tmp"

# Image quality bounds accepted by the Pillow producer
QUALITY_MIN = 1
QUALITY_MAX = 100
