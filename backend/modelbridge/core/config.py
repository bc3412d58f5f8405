"""
ModelBridge Configuration - Matcher weights, scoring caps and synonym tables.

Configuration is loaded from modelbridge.yaml (packaged under modelbridge/config)
or from the file named by the MODELBRIDGE_CONFIG environment variable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from modelbridge.infrastructure.logging.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_DIR = Path(__file__).parent.parent / "config"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "modelbridge.yaml"


@dataclass(frozen=True)
class MatchWeights:
    """Weights of the entity match score components."""
    name: float = 0.4
    fields: float = 0.6
    operations: float = 0.0

    @classmethod
    def with_operations(cls) -> "MatchWeights":
        """The name / fields / operations weighting used by service discovery."""
        return cls(name=0.4, fields=0.4, operations=0.2)


@dataclass
class MatcherConfig:
    """Entity/field matcher settings."""
    weights: MatchWeights = field(default_factory=MatchWeights)
    threshold: float = 0.3
    synonym_score: float = 0.8


@dataclass
class ScoringConfig:
    """Translation confidence and efficiency settings."""
    confidence_cap: float = 0.95
    confidence_floor: float = 0.1
    efficiency_floor: float = 0.3
    normalization_confidence: float = 0.95

    def __post_init__(self) -> None:
        # Standard translations never report certainty
        if not 0.0 <= self.confidence_cap < 1.0:
            raise ValueError(f"confidence_cap must be in [0, 1), got {self.confidence_cap}")


@dataclass
class DomainConfig:
    """Defaults applied when compiling business domains."""
    universal_tag: str = "universal"
    translatable_from: list[str] = field(default_factory=lambda: ["stripe", "shopify", "mailchimp"])
    translatable_to: list[str] = field(default_factory=lambda: ["json", "csv", "api"])
    default_version: str = "1.0.0"


@dataclass
class ModelBridgeConfig:
    """Complete modelbridge configuration."""

    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    domain: DomainConfig = field(default_factory=DomainConfig)

    entity_synonyms: dict[str, list[str]] = field(default_factory=dict)
    field_synonyms: dict[str, list[str]] = field(default_factory=dict)
    compatible_entities: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ModelBridgeConfig":
        """Create config from dictionary."""
        matcher_data = data.get("matcher", {})
        weights_data = matcher_data.get("weights", {})
        scoring_data = data.get("scoring", {})
        domain_data = data.get("domain", {})
        synonyms_data = data.get("synonyms", {})

        defaults = DomainConfig()

        return cls(
            matcher=MatcherConfig(
                weights=MatchWeights(
                    name=float(weights_data.get("name", 0.4)),
                    fields=float(weights_data.get("fields", 0.6)),
                    operations=float(weights_data.get("operations", 0.0)),
                ),
                threshold=float(matcher_data.get("threshold", 0.3)),
                synonym_score=float(matcher_data.get("synonym_score", 0.8)),
            ),
            scoring=ScoringConfig(
                confidence_cap=float(scoring_data.get("confidence_cap", 0.95)),
                confidence_floor=float(scoring_data.get("confidence_floor", 0.1)),
                efficiency_floor=float(scoring_data.get("efficiency_floor", 0.3)),
                normalization_confidence=float(scoring_data.get("normalization_confidence", 0.95)),
            ),
            domain=DomainConfig(
                universal_tag=domain_data.get("universal_tag", defaults.universal_tag),
                translatable_from=list(domain_data.get("translatable_from", defaults.translatable_from)),
                translatable_to=list(domain_data.get("translatable_to", defaults.translatable_to)),
                default_version=str(domain_data.get("default_version", defaults.default_version)),
            ),
            entity_synonyms=normalize_synonym_table(synonyms_data.get("entities", {})),
            field_synonyms=normalize_synonym_table(synonyms_data.get("fields", {})),
            compatible_entities=normalize_synonym_table(synonyms_data.get("compatible_entities", {})),
        )


def normalize_synonym_table(table: dict[str, list[str]] | None) -> dict[str, list[str]]:
    return {
        str(key).lower(): [str(v).lower() for v in (values or [])]
        for key, values in (table or {}).items()
    }


_config: ModelBridgeConfig | None = None
_config_path: Path | None = None


def load_config(config_path: str | Path | None = None) -> ModelBridgeConfig:
    """Load configuration from file, falling back to defaults."""
    global _config, _config_path

    if config_path:
        _config_path = Path(config_path)
    elif _config_path is None:
        _config_path = Path(os.getenv("MODELBRIDGE_CONFIG", DEFAULT_CONFIG_PATH))

    if not _config_path.exists():
        logger.warning(f"ModelBridge config file not found: {_config_path}, using defaults")
        _config = ModelBridgeConfig()
        return _config

    with open(_config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    _config = ModelBridgeConfig.from_dict(data or {})
    logger.info(f"Loaded modelbridge config from {_config_path}")
    return _config


def get_config() -> ModelBridgeConfig:
    """Get current configuration, loading it on first use."""
    if _config is None:
        return load_config()
    return _config


def reload_config() -> ModelBridgeConfig:
    """Reload configuration from file."""
    global _config
    _config = None
    return load_config()
