"""Per-ingestion cache of everything fetched over the network."""

import asyncio
import logging
from dataclasses import dataclass, field

from lexigraph.config import settings
from lexigraph.services.audio.downloader import AudioDownloader, DownloadResult
from lexigraph.services.enrichment.frequency import FrequencyClient, FrequencyData
from lexigraph.services.enrichment.translation import (
    TranslatedDefinitions,
    TranslationClient,
    parse_translated_definitions,
)
from lexigraph.services.lexicon.types import ProcessedWordData, RelationshipType

logger = logging.getLogger(__name__)

_TRANSLATED_RELATIONS = {
    RelationshipType.SYNONYM: "synonym",
    RelationshipType.ANTONYM: "antonym",
}


@dataclass
class IngestionContext:
    """Enrichment results for one ingestion.

    ``prefetch`` fills the caches concurrently before the database
    transaction starts. Lookups that miss the cache fetch lazily and are
    cached too, so each (word, language) is requested at most once.
    """

    frequency_client: FrequencyClient | None = None
    downloader: AudioDownloader | None = None
    translation_client: TranslationClient | None = None
    frequencies: dict[tuple[str, str], FrequencyData | None] = field(default_factory=dict)
    downloads: dict[str, DownloadResult] = field(default_factory=dict)
    translations: TranslatedDefinitions | None = None

    async def frequency(self, word: str, language: str) -> FrequencyData | None:
        key = (word, language)
        if key not in self.frequencies:
            if self.frequency_client is None:
                self.frequencies[key] = None
            else:
                logger.debug(f"Frequency cache miss for '{word}' ({language})")
                self.frequencies[key] = await self.frequency_client.get_frequency(word, language)
        return self.frequencies[key]

    async def general_frequency(self, word: str, language: str) -> int | None:
        data = await self.frequency(word, language)
        return data.general if data else None

    async def part_of_speech_frequency(
        self, word: str, language: str, part_of_speech: str
    ) -> int | None:
        data = await self.frequency(word, language)
        return data.for_part_of_speech(part_of_speech) if data else None

    def stored_url(self, url: str) -> str:
        """Local URL of a downloaded file, or the original URL when it was not mirrored."""
        result = self.downloads.get(url)
        return result.stored_url if result else url

    async def _prefetch_frequencies(self, keys: list[tuple[str, str]]) -> None:
        missing = [key for key in keys if key not in self.frequencies]
        if not missing or self.frequency_client is None:
            return
        results = await asyncio.gather(
            *(self.frequency_client.get_frequency(word, language) for word, language in missing)
        )
        self.frequencies.update(zip(missing, results, strict=True))

    async def _prefetch_audio(self, processed: ProcessedWordData) -> None:
        if self.downloader is None:
            return
        urls = [audio.url for audio in processed.word.audio_files]
        for sub_word in processed.sub_words:
            urls.extend(audio.url for audio in sub_word.audio_files)
        urls = [url for url in dict.fromkeys(urls) if url not in self.downloads]
        if urls:
            self.downloads.update(
                await self.downloader.download_many(urls, {"word": processed.headword})
            )

    async def _prefetch_translation(self, processed: ProcessedWordData) -> None:
        if self.translation_client is None or not processed.definitions:
            return
        related = [
            (sub_word.word, _TRANSLATED_RELATIONS[relationship.type])
            for sub_word in processed.sub_words
            for relationship in sub_word.relationships
            if relationship.type in _TRANSLATED_RELATIONS
        ]
        response = await self.translation_client.translate_word_data(
            word=processed.headword,
            phonetic=processed.word.phonetic,
            definitions=processed.definitions,
            stems=processed.stems,
            related_words=list(dict.fromkeys(related)),
            source_language=processed.word.language,
            part_of_speech=processed.word.part_of_speech.value,
        )
        if response is not None:
            self.translations = parse_translated_definitions(response, settings.target_language)

    async def prefetch(self, processed: ProcessedWordData) -> None:
        """Fetch frequency, audio and translation data for a processed entry concurrently."""
        keys = [(processed.headword, processed.word.language)]
        keys.extend((sub_word.word, sub_word.language) for sub_word in processed.sub_words)
        await asyncio.gather(
            self._prefetch_frequencies(list(dict.fromkeys(keys))),
            self._prefetch_audio(processed),
            self._prefetch_translation(processed),
        )
        logger.debug(
            f"Prefetched '{processed.headword}': {len(self.frequencies)} frequency lookups, "
            f"{len(self.downloads)} audio files"
        )


def default_context(skip_audio: bool = False) -> IngestionContext:
    """Context wired to the configured HTTP collaborators."""
    return IngestionContext(
        frequency_client=FrequencyClient(),
        downloader=None if skip_audio else AudioDownloader(),
        translation_client=TranslationClient() if settings.translation_enabled else None,
    )
