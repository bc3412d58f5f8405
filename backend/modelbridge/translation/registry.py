"""Translator Registry - one translator per ordered model pair."""

from typing import Iterator

from modelbridge.infrastructure.logging.logging_config import get_logger
from modelbridge.translation.translator import Translator, translator_key

logger = get_logger(__name__)


class TranslatorRegistry:
    """
    Strategy map keyed by "source->target".

    Registering a translator for an existing pair replaces it; the size of
    the registry does not change.
    """

    def __init__(self) -> None:
        self._translators: dict[str, Translator] = {}

    def register(self, translator: Translator) -> None:
        key = translator_key(translator.source_model, translator.target_model)
        replaced = key in self._translators
        self._translators[key] = translator
        if replaced:
            logger.info(f"Replaced translator {key} with {translator.name}")
        else:
            logger.debug(f"Registered translator {key}: {translator.name}")

    def get(self, source_model: str, target_model: str) -> Translator | None:
        return self._translators.get(translator_key(source_model, target_model))

    def keys(self) -> list[str]:
        return list(self._translators.keys())

    def clear(self) -> None:
        self._translators.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._translators

    def __len__(self) -> int:
        return len(self._translators)

    def __iter__(self) -> Iterator[Translator]:
        return iter(list(self._translators.values()))
