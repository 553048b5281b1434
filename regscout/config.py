"""Configuration file loader for regscout.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``regscout.toml``: settings under ``[regscout]`` table
- ``pyproject.toml``: settings under ``[tool.regscout]`` table

Discovery order:

1. Explicit path from ``--config`` or ``REGSCOUT_CONFIG``
2. ``regscout.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.regscout]`` section

Configuration precedence: defaults < config file < environment < CLI args.
The GitHub token is normally supplied through ``GITHUB_TOKEN`` or
``GH_TOKEN`` and is never written to logs.

Example (``regscout.toml``)::

    [regscout]
    tracked_dependency = "@elizaos/core"
    candidate_branches = ["main", "develop"]
    cache_ttl = 900
    max_concurrency = 8

    [regscout.package_name_prefixes]
    "@elizaos-plugins/" = "@elizaos/"
"""

from __future__ import annotations

import os
import tomli as tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from regscout.exceptions import ConfigError
from regscout.utils.logger import get_logger
from regscout.constants import (
    CANDIDATE_BRANCHES,
    DEFAULT_AGGREGATION_TIMEOUT,
    DEFAULT_CACHE_TTL,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_TIMEOUT,
    GITHUB_API_URL,
    PACKAGE_INDEX_URL,
    PACKAGE_NAME_PREFIXES,
    REGISTRY_INDEX_URL,
    TOKEN_ENV_VARS,
    TRACKED_DEPENDENCY,
)

logger = get_logger("config")


@dataclass
class RegScoutConfig:
    """Parsed and validated regscout configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        index_url: Registry index document URL.
        github_api_url: GitHub REST API base URL.
        package_index_url: npm package document URL template.
        tracked_dependency: Dependency whose range decides v0/v1 support.
        candidate_branches: Branches inspected, in priority order.
        package_name_prefixes: Identifier → npm name prefix rewrites.
        cache_ttl: Seconds a snapshot is served without refreshing.
        aggregation_timeout: Seconds one aggregation cycle may run.
        max_concurrency: Packages reconciled at the same time.
        request_timeout: Per-request network timeout in seconds.
        github_token: GitHub token (from the environment by default).
        source_path: Path to loaded config file, or ``None``.
    """

    index_url: str = REGISTRY_INDEX_URL
    github_api_url: str = GITHUB_API_URL
    package_index_url: str = PACKAGE_INDEX_URL
    tracked_dependency: str = TRACKED_DEPENDENCY
    candidate_branches: List[str] = field(default_factory=lambda: list(CANDIDATE_BRANCHES))
    package_name_prefixes: Dict[str, str] = field(
        default_factory=lambda: dict(PACKAGE_NAME_PREFIXES)
    )
    cache_ttl: int = DEFAULT_CACHE_TTL
    aggregation_timeout: float = DEFAULT_AGGREGATION_TIMEOUT
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    request_timeout: int = DEFAULT_TIMEOUT

    github_token: Optional[str] = field(default=None, repr=False)

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        The token is masked and ``source_path`` is excluded.
        """
        return {
            "index_url": self.index_url,
            "github_api_url": self.github_api_url,
            "package_index_url": self.package_index_url,
            "tracked_dependency": self.tracked_dependency,
            "candidate_branches": list(self.candidate_branches),
            "package_name_prefixes": dict(self.package_name_prefixes),
            "cache_ttl": self.cache_ttl,
            "aggregation_timeout": self.aggregation_timeout,
            "max_concurrency": self.max_concurrency,
            "request_timeout": self.request_timeout,
            "github_token": "***" if self.github_token else None,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    regscout_toml = cwd / "regscout.toml"
    if regscout_toml.is_file():
        logger.debug("Found regscout.toml: %s", regscout_toml)
        return regscout_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_regscout_section(pyproject_toml):
        logger.debug("Found [tool.regscout] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_regscout_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.regscout] section.

    Parse errors are ignored so that a broken pyproject.toml does not stop
    auto-discovery.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "regscout" in raw.get("tool", {})


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RegScoutConfig:
    """Load and validate regscout configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Validated :class:`RegScoutConfig`.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    environ = os.environ if environ is None else environ
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        config = RegScoutConfig()
    else:
        logger.info("Loading configuration from %s", resolved)
        raw = _read_toml(resolved)

        if resolved.name == "pyproject.toml":
            section = raw.get("tool", {}).get("regscout", {})
        else:
            section = raw.get("regscout", {})

        if section:
            config = _parse_section(section, config_path=str(resolved))
        else:
            logger.debug("Config file found but no regscout section, using defaults")
            config = RegScoutConfig()
        config.source_path = resolved

    _apply_environment(config, environ)
    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _is_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(_is_str(item) for item in value)


def _is_str_table(value: Any) -> bool:
    return isinstance(value, dict) and all(
        _is_str(k) and isinstance(v, str) for k, v in value.items()
    )


#: option → (validator, human-readable type)
_OPTIONS: Dict[str, "tuple[Callable[[Any], bool], str]"] = {
    "index_url": (_is_str, "a non-empty string"),
    "github_api_url": (_is_str, "a non-empty string"),
    "package_index_url": (_is_str, "a non-empty string"),
    "tracked_dependency": (_is_str, "a non-empty string"),
    "candidate_branches": (_is_str_list, "a list of branch names"),
    "package_name_prefixes": (_is_str_table, "a table of string prefixes"),
    "cache_ttl": (_is_positive_int, "a positive integer"),
    "aggregation_timeout": (_is_positive_number, "a positive number"),
    "max_concurrency": (_is_positive_int, "a positive integer"),
    "request_timeout": (_is_positive_int, "a positive integer"),
    "github_token": (_is_str, "a non-empty string"),
}


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> RegScoutConfig:
    """Parse and validate a ``[regscout]`` or ``[tool.regscout]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    unknown = set(section.keys()) - set(_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = RegScoutConfig()
    for option, value in section.items():
        validator, expected = _OPTIONS[option]
        if not validator(value):
            raise ConfigError(
                f"{option} must be {expected}, got {type(value).__name__}",
                config_path=config_path,
                option=option,
            )
        if option == "package_index_url" and "{package}" not in value:
            raise ConfigError(
                "package_index_url must contain a {package} placeholder",
                config_path=config_path,
                option=option,
            )
        setattr(config, option, value)

    return config


_ENV_OVERRIDES: Dict[str, "tuple[str, Callable[[str], Any]]"] = {
    "REGSCOUT_CACHE_TTL": ("cache_ttl", int),
    "REGSCOUT_AGGREGATION_TIMEOUT": ("aggregation_timeout", float),
    "REGSCOUT_MAX_CONCURRENCY": ("max_concurrency", int),
}


def _apply_environment(config: RegScoutConfig, environ: Mapping[str, str]) -> None:
    """Overlay environment variables onto *config*.

    Raises:
        ConfigError: A numeric override is not a positive number.
    """
    for name in TOKEN_ENV_VARS:
        token = environ.get(name)
        if token:
            config.github_token = token
            break

    for name, (option, convert) in _ENV_OVERRIDES.items():
        raw = environ.get(name)
        if raw is None or raw == "":
            continue
        try:
            value = convert(raw)
        except ValueError as exc:
            raise ConfigError(
                f"{name} must be numeric, got {raw!r}", option=option
            ) from exc
        if value <= 0:
            raise ConfigError(f"{name} must be positive, got {raw!r}", option=option)
        setattr(config, option, value)
