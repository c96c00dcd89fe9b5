"""Configuration loader for the SimNet similarity network core."""
from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

LOGGER = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_ENV_FILE = REPO_ROOT / ".env"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

CLUSTERING_ENV_OVERRIDES = {
    "SIMNET_CLUSTERING_SEED": "seed",
    "SIMNET_CLUSTERING_RESOLUTION": "resolution",
}


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded."""


class _FrozenModel(BaseModel):
    """Base model enforcing immutability for config sections."""

    model_config = ConfigDict(frozen=True)


def _validate_hex(value: str) -> str:
    cleaned = value.strip()
    if not _HEX_COLOR.match(cleaned):
        msg = f"Expected a hex color like '#03c75a', got {value!r}"
        raise ValueError(msg)
    return cleaned.lower()


class PipelineConfig(_FrozenModel):
    """Pipeline-level configuration."""

    version: str = Field(..., min_length=1)


class IngestionConfig(_FrozenModel):
    """Column layout of the edge list and auxiliary tables."""

    source_column: str = Field("Source1", min_length=1)
    target_column: str = Field("Source2", min_length=1)
    weight_column: str = Field("Weight", min_length=1)
    title_prefix_pattern: str = Field(r"^[a-z]{3}_\d+_", min_length=1)
    image_extensions: List[str] = Field(default_factory=lambda: ["jpg"])
    thumbnail_title_index: int = Field(2, ge=0)
    thumbnail_url_index: int = Field(3, ge=0)
    tag_title_column: str = Field("title", min_length=1)
    tag_list_column: str = Field("tags", min_length=1)

    @field_validator("image_extensions")
    @classmethod
    def _normalize_extensions(cls, values: List[str]) -> List[str]:
        normalized: List[str] = []
        for value in values:
            cleaned = value.strip().lstrip(".").lower()
            if cleaned and cleaned not in normalized:
                normalized.append(cleaned)
        if not normalized:
            msg = "At least one image extension must be configured"
            raise ValueError(msg)
        return normalized

    @field_validator("title_prefix_pattern")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            msg = f"Invalid title prefix pattern: {exc}"
            raise ValueError(msg) from exc
        return value

    @model_validator(mode="after")
    def _validate_thumbnail_columns(self) -> "IngestionConfig":
        if self.thumbnail_title_index == self.thumbnail_url_index:
            msg = "ingestion.thumbnail_title_index and thumbnail_url_index must differ"
            raise ValueError(msg)
        return self


class SizeRange(_FrozenModel):
    """Inclusive visual size range used for min–max scaling."""

    min: float = Field(..., gt=0)
    max: float = Field(..., gt=0)

    @model_validator(mode="after")
    def _validate_bounds(self) -> "SizeRange":
        if self.max < self.min:
            msg = "size range max cannot be smaller than min"
            raise ValueError(msg)
        return self

    @property
    def fallback(self) -> float:
        """Size assigned when the metric domain is degenerate."""

        return self.min


class SizingConfig(_FrozenModel):
    """Node and edge sizing ranges."""

    node: SizeRange
    edge: SizeRange


class ClusteringConfig(_FrozenModel):
    """Louvain community detection settings."""

    enabled: bool = False
    resolution: float = Field(1.0, gt=0.0)
    threshold: float = Field(1e-7, gt=0.0)
    seed: Optional[int] = Field(42, ge=0)


class PaletteConfig(_FrozenModel):
    """Community palette settings."""

    fixed_colors: List[str] = Field(..., min_length=1)
    seed: int = Field(42, ge=0)
    sample_count: int = Field(2000, ge=100)
    iterations: int = Field(50, ge=1)
    chroma_min: float = Field(30.0, ge=0.0)
    chroma_max: float = Field(80.0, ge=0.0)
    lightness_min: float = Field(35.0, ge=0.0, le=100.0)
    lightness_max: float = Field(80.0, ge=0.0, le=100.0)

    @field_validator("fixed_colors")
    @classmethod
    def _validate_colors(cls, values: List[str]) -> List[str]:
        return [_validate_hex(value) for value in values]

    @model_validator(mode="after")
    def _validate_bounds(self) -> "PaletteConfig":
        if self.chroma_max <= self.chroma_min:
            msg = "palette.chroma_max must exceed palette.chroma_min"
            raise ValueError(msg)
        if self.lightness_max <= self.lightness_min:
            msg = "palette.lightness_max must exceed palette.lightness_min"
            raise ValueError(msg)
        return self


class CommaFixConfig(_FrozenModel):
    """Literal substring correction applied by the punctuation-insertion rule."""

    find: str = Field(..., min_length=1)
    replace: str = Field(..., min_length=1)


class ResolutionConfig(_FrozenModel):
    """Entity resolution cascade settings."""

    colon_chars: str = Field(":：", min_length=1)
    bracket_chars: str = Field("()[]{}（）［］【】「」<>", min_length=1)
    period_chars: str = Field(".·", min_length=1)
    appended_char: str = Field("!", min_length=1, max_length=1)
    comma_fixes: List[CommaFixConfig] = Field(default_factory=list)
    key_suffixes: Dict[str, str] = Field(default_factory=dict)

    def key_suffix(self, table: str) -> str:
        """Return the key suffix used by the named auxiliary table."""

        return self.key_suffixes.get(table, "")


class TooltipConfig(_FrozenModel):
    """Tooltip geometry relative to the pointer."""

    width: float = Field(300.0, gt=0)
    height: float = Field(250.0, gt=0)
    offset_x: float = 15.0
    offset_y: float = -200.0
    flip_margin: float = Field(30.0, ge=0)
    drop_offset: float = Field(250.0, ge=0)


class InteractionConfig(_FrozenModel):
    """Hover highlighting settings."""

    base_color: str = "#03c75a"
    edge_color: str = "#666666"
    dim_alpha: float = Field(0.1, ge=0.0, le=1.0)
    shrink_factor: float = Field(0.3, gt=0.0, le=1.0)
    min_node_size: float = Field(1.0, ge=0.0)
    min_edge_size: float = Field(0.5, ge=0.0)
    tooltip: TooltipConfig = Field(default_factory=TooltipConfig)

    @field_validator("base_color", "edge_color")
    @classmethod
    def _validate_color(cls, value: str) -> str:
        return _validate_hex(value)


class LayoutConfig(_FrozenModel):
    """Force-directed layout adapter settings."""

    iterations: int = Field(500, ge=1)
    seed: int = Field(42, ge=0)
    scale: float = Field(1.0, gt=0.0)


class AppConfig(_FrozenModel):
    """Top-level application configuration composed from config.yaml."""

    pipeline: PipelineConfig
    ingestion: IngestionConfig
    sizing: SizingConfig
    clustering: ClusteringConfig
    palette: PaletteConfig
    resolution: ResolutionConfig
    interaction: InteractionConfig
    layout: LayoutConfig

    @staticmethod
    def default_path() -> Path:
        """Return the default location of the configuration file.

        Returns:
            Path: Absolute path to config.yaml at the repository root.
        """
        return REPO_ROOT / "config.yaml"


def _determine_env_file_path() -> Optional[Path]:
    """Return the path to the environment file if one should be loaded."""

    override = os.getenv("SIMNET_ENV_FILE")
    if override:
        candidate = Path(override).expanduser()
        if candidate.exists():
            return candidate
        LOGGER.warning("Configured environment file override does not exist: %s", candidate)
        return None
    if DEFAULT_ENV_FILE.exists():
        return DEFAULT_ENV_FILE
    return None


def _strip_inline_comment(value: str) -> str:
    """Remove inline comments from an environment value when unquoted."""

    comment_index = value.find("#")
    if comment_index == -1:
        return value
    return value[:comment_index].rstrip()


def _load_env_file(path: Path) -> None:
    """Populate ``os.environ`` with values read from a ``.env`` file."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if line.lower().startswith("export "):
                    line = line[7:].lstrip()
                if "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                key = key.strip()
                if not key:
                    continue
                existing_value = os.environ.get(key)
                if existing_value is not None and existing_value.strip() != "":
                    continue
                value = raw_value.strip()
                if not value:
                    os.environ[key] = ""
                    continue
                if value[0] in {'"', "'"} and value[-1] == value[0]:
                    os.environ[key] = value[1:-1]
                    continue
                os.environ[key] = _strip_inline_comment(value)
    except OSError:
        LOGGER.warning("Unable to read environment file at %s", path)


def _apply_environment_overrides(raw_content: Dict[str, Any]) -> Dict[str, Any]:
    """Merge environment-based overrides into the raw configuration mapping.

    Args:
        raw_content: Parsed YAML configuration prior to Pydantic validation.

    Returns:
        Dict[str, Any]: Configuration mapping with environment overrides applied.
    """

    env_file_path = _determine_env_file_path()
    if env_file_path is not None:
        _load_env_file(env_file_path)

    for env_key, field_name in CLUSTERING_ENV_OVERRIDES.items():
        raw = os.getenv(env_key)
        if raw is None or not raw.strip():
            continue
        clustering_section = raw_content.get("clustering")
        if clustering_section is None:
            clustering_section = raw_content["clustering"] = {}
        elif not isinstance(clustering_section, dict):
            msg = f"Cannot apply {env_key}: the clustering section must be a mapping"
            raise ConfigError(msg)
        clustering_section[field_name] = raw.strip()
        LOGGER.info("Clustering %s overridden from environment (%s)", field_name, env_key)
    return raw_content


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read YAML content from disk.

    Args:
        path: Location of the YAML file.

    Returns:
        Dict[str, Any]: Parsed YAML content.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        LOGGER.error("Configuration file missing at %s", path)
        raise ConfigError("Configuration file not found") from exc
    except yaml.YAMLError as exc:
        LOGGER.error("Invalid YAML syntax in %s", path)
        raise ConfigError("Invalid YAML syntax") from exc
    if not isinstance(data, dict):
        LOGGER.error("Configuration root must be a mapping: %s", path)
        raise ConfigError("Configuration root must be a mapping")
    return data


@lru_cache(maxsize=1)
def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load application configuration from YAML.

    Args:
        path: Optional override path to the YAML file.

    Returns:
        AppConfig: Parsed configuration object.

    Raises:
        ConfigError: If the configuration cannot be loaded or validated.
    """
    config_path = path or AppConfig.default_path()
    raw_content = _read_yaml(config_path)
    raw_content = _apply_environment_overrides(raw_content)
    try:
        return AppConfig(**raw_content)
    except ValidationError as exc:
        LOGGER.error("Invalid configuration values: %s", exc)
        raise ConfigError("Configuration validation failed") from exc
