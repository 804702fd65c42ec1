"""Configuration loading for livedoc (.livedoc.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml

CONFIG_FILENAME = ".livedoc.yml"
ENV_API_KEY_KEYS = ("LIVEDOC_API_KEY", "GEMINI_API_KEY")

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models"

DEFAULT_PATTERNS: Tuple[str, ...] = ("**/*.js", "**/*.jsx", "**/*.ts", "**/*.tsx")
DEFAULT_EXCLUDES: Tuple[str, ...] = (
    "node_modules/**",
    "dist/**",
    "build/**",
    "coverage/**",
    ".git/**",
    "**/*.min.js",
    "**/*.test.js",
    "**/*.spec.js",
)


class ConfigError(RuntimeError):
    """Raised when configuration is unreadable, invalid, or missing a credential."""


@dataclass(frozen=True)
class GenerationConfig:
    """Generation service settings and retry budget."""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT
    temperature: float = 0.2
    max_output_tokens: int = 1024
    request_timeout: float = 60.0
    max_attempts: int = 3
    base_delay: float = 1.0


@dataclass(frozen=True)
class SyncConfig:
    """Which document to patch and which sources feed it."""

    docs_file: str = "README.md"
    source_pattern: str = "src/**/*.js"
    path_prefix: str = "src/"
    extensions: Tuple[str, ...] = (".js",)


@dataclass(frozen=True)
class AnalysisConfig:
    """File discovery and reporting settings for the analysis pipeline."""

    patterns: Tuple[str, ...] = DEFAULT_PATTERNS
    exclude: Tuple[str, ...] = DEFAULT_EXCLUDES
    top_n: int = 10


@dataclass(frozen=True)
class LiveDocConfig:
    """Immutable settings for one run, built once at the process boundary."""

    root: Path
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    templates_dir: Optional[Path] = None

    @property
    def docs_path(self) -> Path:
        return self.root / self.sync.docs_file


def load_config(config_path: Path, environ: Mapping[str, str] | None = None) -> LiveDocConfig:
    """Load configuration from ``.livedoc.yml`` plus credential environment variables."""
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    llm_data = _as_dict(data.get("llm"))
    retry_data = _as_dict(data.get("retry"))
    generation = GenerationConfig(
        api_key=_first_env_value(env, ENV_API_KEY_KEYS) or _as_str(llm_data.get("api_key")),
        model=_as_str(llm_data.get("model")) or DEFAULT_MODEL,
        endpoint=(_as_str(llm_data.get("endpoint")) or DEFAULT_ENDPOINT).rstrip("/"),
        temperature=_or_default(_as_float(llm_data.get("temperature")), 0.2),
        max_output_tokens=_or_default(_as_int(llm_data.get("max_output_tokens")), 1024),
        request_timeout=_or_default(_as_float(llm_data.get("request_timeout")), 60.0),
        max_attempts=_or_default(_as_int(retry_data.get("max_attempts")), 3),
        base_delay=_or_default(_as_float(retry_data.get("base_delay")), 1.0),
    )
    if generation.max_attempts < 1:
        raise ConfigError("retry.max_attempts must be at least 1")
    if generation.base_delay < 0:
        raise ConfigError("retry.base_delay must not be negative")
    if generation.max_output_tokens < 1:
        raise ConfigError("llm.max_output_tokens must be positive")

    sync_data = _as_dict(data.get("sync"))
    extensions = tuple(_as_str_list(sync_data.get("extensions"))) or SyncConfig.extensions
    sync = SyncConfig(
        docs_file=_as_str(sync_data.get("docs_file")) or SyncConfig.docs_file,
        source_pattern=_as_str(sync_data.get("source_pattern")) or SyncConfig.source_pattern,
        path_prefix=_as_str(sync_data.get("path_prefix")) or SyncConfig.path_prefix,
        extensions=tuple(ext if ext.startswith(".") else f".{ext}" for ext in extensions),
    )

    analysis_data = _as_dict(data.get("analysis"))
    analysis = AnalysisConfig(
        patterns=tuple(_as_str_list(analysis_data.get("patterns"))) or DEFAULT_PATTERNS,
        exclude=tuple(_as_str_list(analysis_data.get("exclude"))) or DEFAULT_EXCLUDES,
        top_n=_or_default(_as_int(analysis_data.get("top_n")), 10),
    )

    templates_dir_str = _as_str(data.get("templates_dir"))
    templates_dir = root / templates_dir_str if templates_dir_str else None

    return LiveDocConfig(
        root=root,
        generation=generation,
        sync=sync,
        analysis=analysis,
        templates_dir=templates_dir,
    )


def require_api_key(config: LiveDocConfig) -> str:
    """Return the generation credential or fail before any network call."""
    api_key = config.generation.api_key
    if not api_key:
        names = " or ".join(ENV_API_KEY_KEYS)
        raise ConfigError(f"{names} environment variable not set.")
    return api_key


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _first_env_value(env: Mapping[str, str], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = env.get(key)
        if value:
            return value
    return None


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
