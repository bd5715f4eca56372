"""Project-wide named constants.

Defaults for a release tree pushed to GitHub, which rejects any single
file above 100 MiB.
"""

MIB: int = 1024 * 1024

# GitHub hard limit per file
DEFAULT_MAX_BYTES: int = 100 * MIB

# Leaves headroom under DEFAULT_MAX_BYTES
DEFAULT_CHUNK_BYTES: int = 95 * MIB

# Peak memory of a split is one buffer of this size
DEFAULT_BUFFER_BYTES: int = 4 * MIB

# Two digits -> at most 99 parts per file
DEFAULT_PART_WIDTH: int = 2

DEFAULT_RELEASE_DIRNAME: str = "release"
DEFAULT_BACKUP_DIRNAME: str = "backup"
EXTERNAL_DIRNAME: str = "_external"
ROOT_TOKEN: str = "ROOT"

DEFAULT_CONFIG_PATH: str = "config/split_config.json"
