"""Persistence Engine: write one processed entry as a single transaction."""

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lexigraph.config import settings
from lexigraph.errors import IngestionError
from lexigraph.models import WordDetails
from lexigraph.services.audio.reconciler import AudioReconciler
from lexigraph.services.enrichment.context import IngestionContext, default_context
from lexigraph.services.enrichment.translation import TranslatedDefinitions
from lexigraph.services.lexicon.labels import is_cross_reference_stub
from lexigraph.services.lexicon.types import (
    PLURAL_RELATIONSHIPS,
    AudioFile,
    DefinitionData,
    ProcessedWordData,
    Relationship,
    SubWordData,
)
from lexigraph.services.persistence.resolver import EndpointResolver
from lexigraph.services.persistence.upserts import (
    has_definitions,
    link_definition,
    upsert_definition,
    upsert_details_relationship,
    upsert_example,
    upsert_translation,
    upsert_word,
    upsert_word_details,
    upsert_word_relationship,
)
from lexigraph.services.sources.base import SourceAdapter

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    """Summary of one committed ingestion."""

    headword: str
    language: str
    word_id: int
    word_details_id: int
    definitions: int = 0
    sub_words: int = 0
    relationships_created: int = 0
    relationships_skipped: int = 0
    audio_links: int = 0
    translations: int = 0


class PersistenceEngine:
    """
    Ingest raw or processed entries into the lexical graph.

    Each entry runs in two phases: enrichment data is fetched into an
    ``IngestionContext`` first, then everything is written in one database
    transaction bounded by ``settings.transaction_timeout``.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        adapter: SourceAdapter | None = None,
        context_factory: Callable[[], IngestionContext] | None = None,
        transaction_timeout: float | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.adapter = adapter
        self.context_factory = context_factory or default_context
        self.transaction_timeout = transaction_timeout or settings.transaction_timeout

    def process(self, entry: Mapping[str, Any] | ProcessedWordData) -> ProcessedWordData:
        if isinstance(entry, ProcessedWordData):
            return entry
        if self.adapter is None:
            raise ValueError("A source adapter is required to ingest raw entries")
        return self.adapter.process(entry)

    async def ingest(self, entry: Mapping[str, Any] | ProcessedWordData) -> IngestionResult:
        """
        Ingest one entry.

        Args:
            entry: Raw source entry (needs an adapter) or ProcessedWordData

        Returns:
            IngestionResult for the committed transaction

        Raises:
            SourceFormatError: If the adapter cannot read the entry
            IngestionError: If the transaction failed and was rolled back
        """
        processed = self.process(entry)
        headword = processed.headword

        context = self.context_factory()
        await context.prefetch(processed)

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    result = await asyncio.wait_for(
                        self._write(session, processed, context),
                        timeout=self.transaction_timeout,
                    )
        except TimeoutError as e:
            logger.error(
                f"Ingestion of '{headword}' exceeded {self.transaction_timeout}s, rolled back"
            )
            raise IngestionError(headword, e) from e
        except Exception as e:
            logger.exception(f"Ingestion of '{headword}' failed, rolled back: {e}")
            raise IngestionError(headword, e) from e

        logger.info(
            f"Ingested '{headword}': {result.sub_words} sub-words, "
            f"{result.relationships_created} new relationships, "
            f"{result.relationships_skipped} skipped"
        )
        return result

    async def _write(
        self,
        session: AsyncSession,
        processed: ProcessedWordData,
        context: IngestionContext,
    ) -> IngestionResult:
        word = processed.word
        part_of_speech = word.part_of_speech.value

        main_word = await upsert_word(
            session,
            word.word,
            word.language,
            etymology=word.etymology,
            phonetic=word.phonetic,
            frequency=await context.general_frequency(word.word, word.language),
            is_highlighted=word.is_highlighted,
            source_entity_id=word.source_entity_id,
        )
        canonical = await upsert_word_details(
            session,
            main_word.id,
            part_of_speech,
            word.variant,
            source=word.source.value,
            phonetic=word.phonetic,
            gender=word.gender.value if word.gender else None,
            forms=word.forms,
            etymology=word.etymology,
            frequency=await context.part_of_speech_frequency(
                word.word, word.language, part_of_speech
            ),
        )
        result = IngestionResult(
            headword=word.word,
            language=word.language,
            word_id=main_word.id,
            word_details_id=canonical.id,
            sub_words=len(processed.sub_words),
        )

        await self._store_definitions(
            session, canonical, processed.definitions, result, context.translations
        )
        await self._store_audio(
            session, canonical, word.audio_files, word.language, context, result
        )

        resolver = EndpointResolver(session, processed, main_word, canonical, context)
        for sub_word in processed.sub_words:
            await resolver.upsert_sub_word(sub_word)
            if sub_word.definitions or sub_word.audio_files:
                details = await resolver.sub_word_details(sub_word)
                await self._store_definitions(session, details, sub_word.definitions, result)
                # The headword's own recordings stay primary on its canonical sense
                if details.id != canonical.id:
                    await self._store_audio(
                        session, details, sub_word.audio_files, sub_word.language, context, result
                    )

        pending = [
            (sub_word, relationship)
            for sub_word in processed.sub_words
            for relationship in sub_word.relationships
        ]
        # Stable sort keeps source order within a priority band
        pending.sort(key=lambda item: item[1].priority)
        for order_index, (sub_word, relationship) in enumerate(pending):
            await self._apply_relationship(
                session, resolver, sub_word, relationship, order_index, result
            )
        return result

    async def _store_definitions(
        self,
        session: AsyncSession,
        details: WordDetails,
        definitions: Sequence[DefinitionData],
        result: IngestionResult,
        translations: TranslatedDefinitions | None = None,
    ) -> None:
        if not definitions:
            return
        is_primary = not await has_definitions(session, details.id)
        for index, data in enumerate(definitions):
            if is_cross_reference_stub(data.definition):
                logger.debug(f"Skipping cross-reference stub definition '{data.definition}'")
                continue
            definition = await upsert_definition(session, data)
            await link_definition(session, details.id, definition.id, is_primary=is_primary)
            result.definitions += 1

            for example_index, example_data in enumerate(data.examples):
                if not example_data.example:
                    continue
                example = await upsert_example(session, definition.id, example_data)
                if translations and (index, example_index) in translations.examples:
                    await upsert_translation(
                        session,
                        "example",
                        example.id,
                        translations.language,
                        translations.examples[(index, example_index)],
                    )
                    result.translations += 1

            if translations and index in translations.definitions:
                await upsert_translation(
                    session,
                    "definition",
                    definition.id,
                    translations.language,
                    translations.definitions[index],
                )
                result.translations += 1

    async def _store_audio(
        self,
        session: AsyncSession,
        details: WordDetails,
        audio_files: Sequence[AudioFile],
        language: str,
        context: IngestionContext,
        result: IngestionResult,
    ) -> None:
        if not audio_files:
            return
        urls = [context.stored_url(audio.url) for audio in audio_files]
        source = details.source
        reconciled = await AudioReconciler(session).reconcile(details, urls, language, source)
        result.audio_links += len([a for a in (reconciled.primary, reconciled.secondary) if a])

    async def _apply_relationship(
        self,
        session: AsyncSession,
        resolver: EndpointResolver,
        sub_word: SubWordData,
        relationship: Relationship,
        order_index: int,
        result: IngestionResult,
    ) -> None:
        if relationship.is_details_level:
            source = await resolver.details(relationship.source, sub_word)
            target = await resolver.details(
                relationship.target,
                sub_word,
                is_plural=relationship.type in PLURAL_RELATIONSHIPS,
            )
        else:
            source = await resolver.word(relationship.source, sub_word)
            target = await resolver.word(relationship.target, sub_word)

        if source is None or target is None:
            unresolved = relationship.source if source is None else relationship.target
            logger.warning(
                f"Skipping {relationship.type.value} relationship of '{sub_word.word}': "
                f"unresolved endpoint {unresolved}"
            )
            result.relationships_skipped += 1
            return

        if relationship.is_details_level:
            _, created = await upsert_details_relationship(
                session, source.id, target.id, relationship.type, order_index
            )
        else:
            if source.id == target.id:
                logger.debug(
                    f"Skipping self-referencing {relationship.type.value} edge on '{sub_word.word}'"
                )
                return
            _, created = await upsert_word_relationship(
                session, source.id, target.id, relationship.type, order_index
            )
        if created:
            result.relationships_created += 1
