"""Select-then-update-or-insert helpers keyed on the schema's unique constraints.

Every helper flushes so callers can use the returned row's id immediately.
Updates only ever fill in data: an empty replacement never blanks a stored
value.
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lexigraph.models import (
    Definition,
    DefinitionExample,
    Translation,
    Word,
    WordDefinition,
    WordDetails,
    WordDetailsRelationship,
    WordToWordRelationship,
)
from lexigraph.services.lexicon.types import (
    DefinitionData,
    ExampleData,
    RelationshipType,
    relationship_description,
)

logger = logging.getLogger(__name__)


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def fill_blanks(row: Any, **values: Any) -> bool:
    """Set attributes whose stored value is empty; returns True if anything changed."""
    changed = False
    for name, value in values.items():
        if _present(value) and not _present(getattr(row, name)):
            setattr(row, name, value)
            changed = True
    return changed


def overwrite_present(row: Any, **values: Any) -> bool:
    """Set attributes to every non-empty replacement; empty replacements are ignored."""
    changed = False
    for name, value in values.items():
        if _present(value) and getattr(row, name) != value:
            setattr(row, name, value)
            changed = True
    return changed


async def find_word(session: AsyncSession, word: str, language: str) -> Word | None:
    result = await session.execute(
        select(Word).where(Word.word == word, Word.language_code == language)
    )
    return result.scalar_one_or_none()


async def upsert_word(
    session: AsyncSession,
    word: str,
    language: str,
    etymology: str | None = None,
    phonetic: str | None = None,
    frequency: int | None = None,
    is_highlighted: bool = False,
    source_entity_id: str | None = None,
    enrich_only: bool = False,
) -> Word:
    """
    Create or enrich the Word for (word, language).

    Enrichment fields are overwritten only by non-empty values and
    ``is_highlighted`` is only ever raised. With ``enrich_only`` an existing
    row is only filled in where it is blank, for callers whose data is
    secondhand (sub-words carry a pointer to their headword as etymology).
    """
    row = await find_word(session, word, language)
    if row is None:
        row = Word(
            word=word,
            language_code=language,
            etymology=etymology or None,
            phonetic_general=phonetic or None,
            frequency_general=frequency,
            is_highlighted=is_highlighted,
            source_entity_id=source_entity_id or None,
        )
        session.add(row)
        logger.debug(f"Created word '{word}' ({language})")
    else:
        merge = fill_blanks if enrich_only else overwrite_present
        merge(
            row,
            etymology=etymology,
            phonetic_general=phonetic,
            frequency_general=frequency,
            source_entity_id=source_entity_id,
        )
        if is_highlighted and not row.is_highlighted:
            row.is_highlighted = True
    await session.flush()
    return row


async def find_word_details(
    session: AsyncSession,
    word_id: int,
    part_of_speech: str,
    variant: str | None = None,
) -> WordDetails | None:
    """Find a sense of a word; without ``variant`` the oldest sense for the part of speech."""
    stmt = select(WordDetails).where(
        WordDetails.word_id == word_id,
        WordDetails.part_of_speech == part_of_speech,
    )
    if variant is not None:
        stmt = stmt.where(WordDetails.variant == variant)
    result = await session.execute(stmt.order_by(WordDetails.id).limit(1))
    return result.scalar_one_or_none()


async def upsert_word_details(
    session: AsyncSession,
    word_id: int,
    part_of_speech: str,
    variant: str | None,
    source: str,
    phonetic: str | None = None,
    gender: str | None = None,
    forms: str | None = None,
    etymology: str | None = None,
    frequency: int | None = None,
    is_plural: bool = False,
) -> WordDetails:
    """Create or fill in the sense keyed by (word, part of speech, variant)."""
    variant = variant or ""
    row = await find_word_details(session, word_id, part_of_speech, variant)
    if row is None:
        row = WordDetails(
            word_id=word_id,
            part_of_speech=part_of_speech,
            variant=variant,
            source=source,
            phonetic=phonetic or None,
            gender=gender or None,
            forms=forms or None,
            etymology=etymology or None,
            frequency=frequency,
            is_plural=is_plural,
        )
        session.add(row)
    else:
        fill_blanks(
            row,
            phonetic=phonetic,
            gender=gender,
            forms=forms,
            etymology=etymology,
            frequency=frequency,
        )
        if is_plural and not row.is_plural:
            row.is_plural = True
    await session.flush()
    return row


async def upsert_definition(session: AsyncSession, data: DefinitionData) -> Definition:
    """Create or enrich the Definition keyed by (text, language, source)."""
    source = str(data.source)
    result = await session.execute(
        select(Definition).where(
            Definition.definition == data.definition,
            Definition.language_code == data.language,
            Definition.source == source,
        )
    )
    row = result.scalar_one_or_none()
    if row is None:
        row = Definition(
            definition=data.definition,
            language_code=data.language,
            source=source,
            subject_status_labels=data.subject_status_labels or None,
            general_labels=data.general_labels or None,
            grammatical_note=data.grammatical_note or None,
            usage_note=data.usage_note or None,
            is_in_short_def=data.is_in_short_def,
        )
        session.add(row)
    else:
        overwrite_present(
            row,
            subject_status_labels=data.subject_status_labels,
            general_labels=data.general_labels,
            grammatical_note=data.grammatical_note,
            usage_note=data.usage_note,
        )
        if data.is_in_short_def and not row.is_in_short_def:
            row.is_in_short_def = True
    await session.flush()
    return row


async def has_definitions(session: AsyncSession, word_details_id: int) -> bool:
    result = await session.execute(
        select(func.count())
        .select_from(WordDefinition)
        .where(WordDefinition.word_details_id == word_details_id)
    )
    return result.scalar_one() > 0


async def link_definition(
    session: AsyncSession, word_details_id: int, definition_id: int, is_primary: bool = False
) -> WordDefinition:
    link = await session.get(WordDefinition, (word_details_id, definition_id))
    if link is None:
        link = WordDefinition(
            word_details_id=word_details_id,
            definition_id=definition_id,
            is_primary=is_primary,
        )
        session.add(link)
        await session.flush()
    return link


async def upsert_example(
    session: AsyncSession, definition_id: int, data: ExampleData
) -> DefinitionExample:
    """Create or fill in the example keyed by (definition, text)."""
    result = await session.execute(
        select(DefinitionExample).where(
            DefinitionExample.definition_id == definition_id,
            DefinitionExample.example == data.example,
        )
    )
    row = result.scalar_one_or_none()
    if row is None:
        row = DefinitionExample(
            definition_id=definition_id,
            example=data.example,
            language_code=data.language,
            grammatical_note=data.grammatical_note or None,
            source_of_example=data.source_of_example or None,
        )
        session.add(row)
    else:
        fill_blanks(
            row,
            grammatical_note=data.grammatical_note,
            source_of_example=data.source_of_example,
        )
    await session.flush()
    return row


async def upsert_word_relationship(
    session: AsyncSession,
    from_word_id: int,
    to_word_id: int,
    relationship_type: RelationshipType,
    order_index: int | None = None,
) -> tuple[WordToWordRelationship, bool]:
    """Create the word edge unless it exists; returns (edge, created)."""
    key = (from_word_id, to_word_id, relationship_type.value)
    edge = await session.get(WordToWordRelationship, key)
    if edge is not None:
        return edge, False
    edge = WordToWordRelationship(
        from_word_id=from_word_id,
        to_word_id=to_word_id,
        type=relationship_type.value,
        description=relationship_description(relationship_type),
        order_index=order_index,
    )
    session.add(edge)
    await session.flush()
    return edge, True


async def upsert_details_relationship(
    session: AsyncSession,
    from_details_id: int,
    to_details_id: int,
    relationship_type: RelationshipType,
    order_index: int | None = None,
) -> tuple[WordDetailsRelationship, bool]:
    """Create the sense edge unless it exists; returns (edge, created)."""
    key = (from_details_id, to_details_id, relationship_type.value)
    edge = await session.get(WordDetailsRelationship, key)
    if edge is not None:
        return edge, False
    edge = WordDetailsRelationship(
        from_word_details_id=from_details_id,
        to_word_details_id=to_details_id,
        type=relationship_type.value,
        description=relationship_description(relationship_type),
        order_index=order_index,
    )
    session.add(edge)
    await session.flush()
    return edge, True


async def upsert_translation(
    session: AsyncSession,
    entity_type: str,
    entity_id: int,
    language: str,
    content: str,
) -> Translation:
    """Store translated content for a definition or example, replacing older text."""
    result = await session.execute(
        select(Translation).where(
            Translation.entity_type == entity_type,
            Translation.entity_id == entity_id,
            Translation.language_code == language,
        )
    )
    row = result.scalar_one_or_none()
    if row is None:
        row = Translation(
            entity_type=entity_type,
            entity_id=entity_id,
            language_code=language,
            content=content,
        )
        session.add(row)
    else:
        overwrite_present(row, content=content)
    await session.flush()
    return row
