"""Resolve symbolic relationship endpoints to persisted rows."""

import logging
from collections import defaultdict

from sqlalchemy.ext.asyncio import AsyncSession

from lexigraph.models import Word, WordDetails
from lexigraph.services.enrichment.context import IngestionContext
from lexigraph.services.lexicon.types import (
    Endpoint,
    LiteralWord,
    MainWord,
    MainWordDetails,
    ProcessedWordData,
    SubWord,
    SubWordData,
    SubWordDetails,
)
from lexigraph.services.persistence.upserts import (
    fill_blanks,
    find_word_details,
    upsert_word,
    upsert_word_details,
)

logger = logging.getLogger(__name__)


class EndpointResolver:
    """Lookup table from the sub-words of one ingestion to their rows.

    Built once per ingestion after the main word and its canonical sense are
    stored. Sub-word senses are created lazily the first time a
    relationship needs them, so the order relationships are applied in
    decides which edge creates a sense.
    """

    def __init__(
        self,
        session: AsyncSession,
        processed: ProcessedWordData,
        main_word: Word,
        canonical: WordDetails,
        context: IngestionContext,
    ) -> None:
        self.session = session
        self.processed = processed
        self.main_word = main_word
        self.canonical = canonical
        self.context = context
        self._by_text: dict[str, list[SubWordData]] = defaultdict(list)
        for sub_word in processed.sub_words:
            self._by_text[sub_word.word].append(sub_word)
        self._words: dict[int, Word] = {}
        self._details: dict[tuple[int, str], WordDetails] = {}

    def is_headword(self, text: str) -> bool:
        return text == self.main_word.word

    async def upsert_sub_word(self, sub_word: SubWordData) -> Word:
        """Store the sub-word's Word, routing the headword's own text to the main word."""
        key = id(sub_word)
        if key in self._words:
            return self._words[key]
        if self.is_headword(sub_word.word):
            logger.debug(f"Sub-word '{sub_word.word}' is the headword, reusing the main word")
            row = self.main_word
        else:
            row = await upsert_word(
                self.session,
                sub_word.word,
                sub_word.language,
                etymology=sub_word.etymology,
                phonetic=sub_word.phonetic,
                frequency=await self.context.general_frequency(sub_word.word, sub_word.language),
                enrich_only=True,
            )
        self._words[key] = row
        return row

    async def sub_word_details(self, sub_word: SubWordData, is_plural: bool = False) -> WordDetails:
        """Find or create the sense of a sub-word for its own part of speech.

        An existing sense is only filled in, never blanked. The headword's
        canonical sense is returned untouched.
        """
        word = await self.upsert_sub_word(sub_word)
        part_of_speech = sub_word.part_of_speech.value
        key = (word.id, part_of_speech)

        details = self._details.get(key)
        if details is None and sub_word.variant:
            details = await find_word_details(self.session, word.id, part_of_speech, sub_word.variant)
        if details is None:
            details = await find_word_details(self.session, word.id, part_of_speech)

        if details is not None and details.id == self.canonical.id:
            self._details[key] = details
            return details

        if details is None:
            details = await upsert_word_details(
                self.session,
                word.id,
                part_of_speech,
                sub_word.variant,
                source=sub_word.source.value,
                phonetic=sub_word.phonetic,
                gender=sub_word.gender.value if sub_word.gender else None,
                forms=sub_word.forms,
                etymology=sub_word.etymology,
                frequency=await self.context.part_of_speech_frequency(
                    sub_word.word, sub_word.language, part_of_speech
                ),
                is_plural=is_plural,
            )
            logger.debug(f"Created sense '{sub_word.word}' ({part_of_speech})")
        else:
            changed = fill_blanks(
                details,
                variant=sub_word.variant,
                phonetic=sub_word.phonetic,
                gender=sub_word.gender.value if sub_word.gender else None,
                forms=sub_word.forms,
                etymology=sub_word.etymology,
            )
            if is_plural and not details.is_plural:
                details.is_plural = True
                changed = True
            if changed:
                await self.session.flush()

        self._details[key] = details
        return details

    def _literal(self, text: str, owner: SubWordData) -> SubWordData | None:
        candidates = self._by_text.get(text)
        if not candidates:
            return None
        for candidate in candidates:
            if candidate.part_of_speech == owner.part_of_speech:
                return candidate
        return candidates[0]

    async def word(self, endpoint: Endpoint, owner: SubWordData) -> Word | None:
        """Word row for an endpoint; ``owner`` is the sub-word that carries the relationship."""
        if isinstance(endpoint, (MainWord, MainWordDetails)):
            return self.main_word
        if isinstance(endpoint, (SubWord, SubWordDetails)):
            return await self.upsert_sub_word(owner)
        if isinstance(endpoint, LiteralWord):
            sibling = self._literal(endpoint.text, owner)
            if sibling is not None:
                return await self.upsert_sub_word(sibling)
            if self.is_headword(endpoint.text):
                return self.main_word
        return None

    async def details(
        self, endpoint: Endpoint, owner: SubWordData, is_plural: bool = False
    ) -> WordDetails | None:
        """WordDetails row for an endpoint, creating sub-word senses as needed."""
        if isinstance(endpoint, (MainWord, MainWordDetails)):
            return self.canonical
        if isinstance(endpoint, (SubWord, SubWordDetails)):
            return await self.sub_word_details(owner, is_plural)
        if isinstance(endpoint, LiteralWord):
            sibling = self._literal(endpoint.text, owner)
            if sibling is not None:
                return await self.sub_word_details(sibling, is_plural)
            if self.is_headword(endpoint.text):
                return self.canonical
        return None
