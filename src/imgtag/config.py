"""Configuration loading and management for imgtag."""

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TypeVar

from .logging import warning

T = TypeVar("T")

CONFIG_DIR = ".imgtag"
CONFIG_FILE = "config.toml"


def _find_similar(key: str, valid_keys: set[str], threshold: float = 0.6) -> str | None:
    """Find a similar key from valid_keys using Levenshtein ratio.

    Args:
        key: The unknown key to match
        valid_keys: Set of valid key names
        threshold: Minimum similarity ratio (0-1) to suggest

    Returns:
        Most similar key if above threshold, None otherwise
    """

    def levenshtein_ratio(s1: str, s2: str) -> float:
        m, n = len(s1), len(s2)
        if m == 0 or n == 0:
            return 0.0

        previous = list(range(n + 1))
        for i in range(1, m + 1):
            current = [i] + [0] * n
            for j in range(1, n + 1):
                cost = 0 if s1[i - 1] == s2[j - 1] else 1
                current[j] = min(
                    previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost
                )
            previous = current

        return 1.0 - (previous[n] / max(m, n))

    best_match = None
    best_ratio = 0.0

    for valid in sorted(valid_keys):
        ratio = levenshtein_ratio(key.lower(), valid.lower())
        if ratio > best_ratio:
            best_ratio = ratio
            best_match = valid

    return best_match if best_ratio >= threshold else None


def _warn_unknown_keys(
    data: dict, valid_keys: set[str], section: str, config_path: Path | None = None
) -> None:
    """Warn about unknown keys in a config section."""
    unknown_keys = set(data.keys()) - valid_keys
    for key in sorted(unknown_keys):
        location = f" in {config_path}" if config_path else ""
        msg = f"Unknown config key '{key}' in [{section}]{location}"

        similar = _find_similar(key, valid_keys)
        if similar:
            msg += f". Did you mean '{similar}'?"

        warning(msg)


def _load_dataclass(
    cls: type[T],
    data: dict,
    defaults: T,
    section: str = "",
    config_path: Path | None = None,
) -> T:
    """Load a dataclass from a dict, falling back to defaults for missing keys."""
    valid_keys = {f.name for f in fields(cls)}
    _warn_unknown_keys(data, valid_keys, section, config_path)

    kwargs = {f.name: data.get(f.name, getattr(defaults, f.name)) for f in fields(cls)}
    return cls(**kwargs)


@dataclass
class RenderConfig:
    """Rendering options."""

    site_root: str = "source"  # Prefix for image sources that are not http(s) URLs


@dataclass
class LookupConfig:
    """Image dimension lookup options."""

    enabled: bool = True
    timeout: float = 10.0
    max_bytes: int = 1024 * 1024


@dataclass
class Config:
    """Main configuration container."""

    render: RenderConfig = field(default_factory=RenderConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)

    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path) -> "Config":
        """Load configuration from a TOML file.

        Args:
            config_path: Path to the config.toml file

        Returns:
            Loaded Config object with defaults merged
        """
        config = cls()
        config.config_path = config_path

        if not config_path.exists():
            return config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        _warn_unknown_keys(data, {"render", "lookup"}, "top-level", config_path)

        if "render" in data:
            config.render = _load_dataclass(
                RenderConfig,
                data["render"],
                config.render,
                section="render",
                config_path=config_path,
            )

        if "lookup" in data:
            config.lookup = _load_dataclass(
                LookupConfig,
                data["lookup"],
                config.lookup,
                section="lookup",
                config_path=config_path,
            )

        return config

    @classmethod
    def find_and_load(cls, start_path: Path | None = None) -> "Config":
        """Find and load .imgtag/config.toml, or return defaults if there is none."""
        if start_path is None:
            start_path = Path.cwd()

        config_path = cls.find_config(start_path)
        if config_path is None:
            return cls()

        return cls.load(config_path)

    @staticmethod
    def find_config(start_path: Path) -> Path | None:
        """Find .imgtag/config.toml starting from start_path.

        Args:
            start_path: Directory to start searching from

        Returns:
            Path to config.toml if found, None otherwise
        """
        current = start_path.resolve()

        while True:
            config_path = current / CONFIG_DIR / CONFIG_FILE
            if config_path.exists():
                return config_path

            parent = current.parent
            if parent == current:
                # Reached filesystem root
                return None
            current = parent


DEFAULT_CONFIG_CONTENT = """\
[render]
# Prefix for image sources that are not http(s) URLs
site_root = "source"

[lookup]
# Probe image files for their width when a caption has none
enabled = true
timeout = 10.0
max_bytes = 1048576
"""
