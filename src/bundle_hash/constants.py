"""Constants for bundle-hash."""

# Digest algorithm shared by file digests and the aggregate package hash
HASH_ALGORITHM = "sha256"
DIGEST_HEX_LENGTH = 64

# Read size for streamed digests
CHUNK_SIZE = 8192

# Platform metadata that never counts as package content
MACOSX_DIR = "__MACOSX"
DS_STORE = ".DS_Store"

# Unix file-type bits stored in the upper half of zip external attributes
S_IFMT = 0xF000
S_IFREG = 0x8000
S_IFDIR = 0x4000

# Configuration
CONFIG_FILE = ".bundle-hash.yaml"
MAX_WORKERS_ENV = "BUNDLE_HASH_MAX_WORKERS"
DEFAULT_MAX_WORKERS = 4

# Version
BUNDLE_HASH_VERSION = "0.1.0"
