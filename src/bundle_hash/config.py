"""Hashing configuration helpers."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from .constants import (
    CHUNK_SIZE,
    CONFIG_FILE,
    DEFAULT_MAX_WORKERS,
    DS_STORE,
    MACOSX_DIR,
    MAX_WORKERS_ENV,
)
from .ignore import IgnoreRules

logger = logging.getLogger(__name__)


@dataclass
class HashConfig:
    """Configuration for manifest builds."""

    max_workers: int = DEFAULT_MAX_WORKERS
    chunk_size: int = CHUNK_SIZE
    ignore_dirs: List[str] = field(default_factory=lambda: [MACOSX_DIR])
    ignore_files: List[str] = field(default_factory=lambda: [DS_STORE])
    ignore_patterns: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.max_workers < 1 or self.chunk_size < 1:
            raise ValueError(
                f"max_workers and chunk_size must be at least 1 "
                f"(got {self.max_workers}, {self.chunk_size})"
            )

    def ignore_rules(self) -> IgnoreRules:
        """Build the entry filter rules for this configuration."""
        return IgnoreRules.create(
            metadata_dirs=self.ignore_dirs,
            metadata_files=self.ignore_files,
            patterns=self.ignore_patterns,
        )


def _env_max_workers(default: int) -> int:
    raw = os.environ.get(MAX_WORKERS_ENV)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", MAX_WORKERS_ENV, raw)
        return default
    return max(1, value)


def _positive_int(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring %s=%r: not an integer", key, value)
        return default
    return max(1, number)


def _name_list(ignore: dict, key: str, default: List[str]) -> List[str]:
    value = ignore.get(key, default)
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        logger.warning("Ignoring ignore.%s=%r: expected a list", key, value)
        return list(default)
    return [str(item) for item in value if item is not None]


def load_hash_config(path: Optional[Path] = None) -> HashConfig:
    """Load configuration from a .bundle-hash.yaml file if present.

    Args:
        path: Config file, or a directory containing .bundle-hash.yaml
              (defaults to the current directory)

    Returns:
        HashConfig; defaults when the file is missing or unreadable.
        BUNDLE_HASH_MAX_WORKERS overrides max_workers either way.
    """
    cfg_path = Path(path) if path is not None else Path.cwd()
    if cfg_path.is_dir():
        cfg_path = cfg_path / CONFIG_FILE

    data = {}
    if cfg_path.exists():
        try:
            data = yaml.safe_load(cfg_path.read_text()) or {}
        except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
            data = {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: expected a mapping", cfg_path)
            data = {}

    ignore = data.get("ignore") or {}
    if not isinstance(ignore, dict):
        ignore = {}
    config = HashConfig(
        max_workers=_positive_int(data, "max_workers", DEFAULT_MAX_WORKERS),
        chunk_size=_positive_int(data, "chunk_size", CHUNK_SIZE),
        ignore_dirs=_name_list(ignore, "dirs", [MACOSX_DIR]),
        ignore_files=_name_list(ignore, "files", [DS_STORE]),
        ignore_patterns=_name_list(ignore, "patterns", []),
    )
    config.max_workers = _env_max_workers(config.max_workers)
    return config
