"""Client for the dictionary translation service."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx

from lexigraph.config import settings
from lexigraph.services.lexicon.types import DefinitionData

logger = logging.getLogger(__name__)

SOURCE_TRANSLATOR = "Helsinki-NLP"


@dataclass
class TranslatedDefinitions:
    """Translations keyed by the position of the definition (and example) in the request."""

    language: str
    definitions: dict[int, str] = field(default_factory=dict)
    examples: dict[tuple[int, int], str] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.definitions or self.examples)


def build_translation_request(
    word: str,
    phonetic: str | None,
    definitions: Sequence[DefinitionData],
    stems: Sequence[str],
    related_words: Sequence[tuple[str, str]],
    source_language: str,
    target_language: str,
    part_of_speech: str = "",
    word_id: int | None = None,
) -> dict[str, Any]:
    """Build one request item for ``/process_dictionary``.

    Definitions and examples are identified by their position so the
    response can be matched before anything has a database id.
    """
    return {
        "metadata": {
            "languageCode": source_language,
            "languageCode_translation": target_language,
            "sourceTranslator": SOURCE_TRANSLATOR,
        },
        "word": {
            "wordId": word_id,
            "word": word,
            "phonetic": phonetic,
            "word_translation": "",
            "phonetic_translation": "",
            "sourceTranslator": SOURCE_TRANSLATOR,
            "word_variants": [],
            "relatedWords": [
                {
                    "type": relationship_type,
                    "word": related,
                    (
                        "synonym_translation"
                        if relationship_type == "synonym"
                        else "antonym_translation"
                    ): "",
                }
                for related, relationship_type in related_words
            ],
        },
        "definitions": [
            {
                "definitionId": index,
                "partOfSpeech": part_of_speech,
                "definition": definition.definition,
                "definition_translation": "",
                "examples": [
                    {
                        "exampleId": example_index,
                        "example": example.example,
                        "example_translation": "",
                    }
                    for example_index, example in enumerate(definition.examples)
                ],
            }
            for index, definition in enumerate(definitions)
        ],
        "stems": list(stems),
        "stems_translation": ["" for _ in stems],
    }


def parse_translated_definitions(response: Any, target_language: str) -> TranslatedDefinitions:
    """Pull definition and example translations out of a service response."""
    result = TranslatedDefinitions(language=target_language)
    if not isinstance(response, dict):
        return result
    word_data = response.get("english_word_data") or response
    for definition in word_data.get("definitions") or []:
        if not isinstance(definition, dict) or not isinstance(definition.get("definitionId"), int):
            continue
        index = definition["definitionId"]
        text = definition.get("definition_translation")
        if isinstance(text, str) and text.strip():
            result.definitions[index] = text.strip()
        for example in definition.get("examples") or []:
            if not isinstance(example, dict) or not isinstance(example.get("exampleId"), int):
                continue
            example_text = example.get("example_translation")
            if isinstance(example_text, str) and example_text.strip():
                result.examples[(index, example["exampleId"])] = example_text.strip()
    return result


class TranslationClient:
    """Translate a word's definitions and examples over HTTP."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self.base_url = (base_url or settings.translation_api_url).rstrip("/")
        self.timeout = timeout or settings.enrichment_timeout

    async def translate_word_data(
        self,
        word: str,
        phonetic: str | None,
        definitions: Sequence[DefinitionData],
        stems: Sequence[str] = (),
        related_words: Sequence[tuple[str, str]] = (),
        source_language: str = "da",
        target_language: str | None = None,
        part_of_speech: str = "",
        word_id: int | None = None,
    ) -> dict[str, Any] | None:
        """
        Send a word graph to the translation service.

        Returns:
            The first item of the response, or None on any failure
        """
        target_language = target_language or settings.target_language
        payload = [
            build_translation_request(
                word,
                phonetic,
                definitions,
                stems,
                related_words,
                source_language,
                target_language,
                part_of_speech,
                word_id,
            )
        ]
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(f"{self.base_url}/process_dictionary", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException:
            logger.warning(f"Translation timed out for '{word}' after {self.timeout}s")
            return None
        except httpx.HTTPStatusError as e:
            logger.error(f"Translation service returned HTTP {e.response.status_code} for '{word}'")
            return None
        except httpx.HTTPError as e:
            logger.error(f"Translation failed for '{word}': {e}")
            return None
        except ValueError as e:
            logger.error(f"Translation service sent invalid JSON for '{word}': {e}")
            return None

        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0]
        logger.debug(f"Translation service returned nothing for '{word}'")
        return None
