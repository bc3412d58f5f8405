"""
Standard model catalogue.

Loads the built-in graph models from config/standard_models.yaml:

```yaml
models:
  - name: social-commerce
    version: "1.0.0"
    compatibility:
      directCompatible: [social-commerce]
    entities:
      Product:
        fields:
          - {name: id, type: string, required: true}
```
"""

from pathlib import Path
from typing import Any

import yaml

from modelbridge.core.config import CONFIG_DIR
from modelbridge.infrastructure.logging.logging_config import get_logger
from modelbridge.models.definitions import ModelDefinition
from modelbridge.models.registry import ModelRegistry

logger = get_logger(__name__)

STANDARD_MODELS_PATH = CONFIG_DIR / "standard_models.yaml"

STANDARD_MODEL_NAMES = (
    "social-commerce",
    "creative-portfolio",
    "professional-network",
    "community-hub",
)


def load_model_definitions(config_path: str | Path | None = None) -> list[ModelDefinition]:
    """Read model definitions from a YAML file."""
    path = Path(config_path) if config_path else STANDARD_MODELS_PATH
    if not path.exists():
        logger.error(f"Model catalogue not found: {path}")
        return []

    with open(path, "r", encoding="utf-8") as f:
        config: dict[str, Any] = yaml.safe_load(f) or {}

    definitions = []
    for model_config in config.get("models", []):
        definitions.append(ModelDefinition.from_dict(model_config))

    logger.info(f"Loaded {len(definitions)} model definitions from {path}")
    return definitions


def register_standard_models(
    registry: ModelRegistry,
    names: list[str] | None = None,
    config_path: str | Path | None = None,
) -> list[ModelDefinition]:
    """
    Register the built-in models (or the named subset) into a registry.

    Returns:
        The definitions that were registered
    """
    registered = []
    for definition in load_model_definitions(config_path):
        if names is not None and definition.name not in names:
            continue
        registry.register(definition)
        registered.append(definition)
    return registered
