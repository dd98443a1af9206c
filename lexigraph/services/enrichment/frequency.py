"""Client for the word-frequency service."""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from lexigraph.config import settings

logger = logging.getLogger(__name__)


@dataclass
class FrequencyData:
    """Frequency ranks for one word.

    ``general`` ranks the spelling across all uses; ``by_part_of_speech``
    maps a part of speech value ("noun", "verb", ...) to its own rank.
    Lower ranks are more frequent.
    """

    word: str
    language: str
    general: int | None = None
    by_part_of_speech: dict[str, int] = field(default_factory=dict)

    def for_part_of_speech(self, part_of_speech: str | None) -> int | None:
        if not part_of_speech:
            return None
        return self.by_part_of_speech.get(str(part_of_speech))


def parse_frequency_item(word: str, language: str, item: Any) -> FrequencyData | None:
    """Parse one item of a ``/frequency`` response; ``None`` when it reports an error."""
    if not isinstance(item, dict):
        return None
    if item.get("error") is not None:
        logger.warning(f"Frequency service error for '{word}': {item['error']}")
        return None

    general = item.get("orderIndexGeneralWord")
    by_part_of_speech: dict[str, int] = {}
    pos_block = item.get("partOfSpeech")
    if item.get("isPartOfSpeech", True) and isinstance(pos_block, dict):
        for pos, data in pos_block.items():
            if isinstance(data, dict) and isinstance(data.get("orderIndexPartOfspeech"), int):
                by_part_of_speech[pos] = data["orderIndexPartOfspeech"]

    return FrequencyData(
        word=word,
        language=language,
        general=general if isinstance(general, int) else None,
        by_part_of_speech=by_part_of_speech,
    )


class FrequencyClient:
    """Look up frequency ranks over HTTP.

    Failures never propagate: every error path logs and returns ``None``.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self.base_url = (base_url or settings.frequency_api_url).rstrip("/")
        self.timeout = timeout or settings.enrichment_timeout

    async def get_frequency(self, word: str, language: str) -> FrequencyData | None:
        """
        Fetch frequency data for a word.

        Args:
            word: Word text
            language: Language code ("da", "en")

        Returns:
            FrequencyData, or None if the service failed or knows nothing
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/frequency",
                    json=[{"word": word, "languageCode": language}],
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException:
            logger.warning(f"Frequency lookup timed out for '{word}' after {self.timeout}s")
            return None
        except httpx.HTTPStatusError as e:
            logger.error(f"Frequency service returned HTTP {e.response.status_code} for '{word}'")
            return None
        except httpx.ConnectError:
            logger.error(f"Cannot connect to frequency service at {self.base_url}")
            return None
        except httpx.HTTPError as e:
            logger.error(f"Frequency lookup failed for '{word}': {e}")
            return None
        except ValueError as e:
            logger.error(f"Frequency service sent invalid JSON for '{word}': {e}")
            return None

        if not isinstance(data, list) or not data:
            logger.debug(f"No frequency data for '{word}'")
            return None
        return parse_frequency_item(word, language, data[0])
