"""Read-only projections over the lexical graph."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lexigraph.models import (
    Definition,
    Translation,
    Word,
    WordDefinition,
    WordDetails,
    WordDetailsAudio,
    WordDetailsRelationship,
    WordToWordRelationship,
)


async def _translations(
    session: AsyncSession, entity_type: str, ids: list[int]
) -> dict[int, dict[str, str]]:
    if not ids:
        return {}
    result = await session.execute(
        select(Translation).where(
            Translation.entity_type == entity_type, Translation.entity_id.in_(ids)
        )
    )
    translations: dict[int, dict[str, str]] = {}
    for row in result.scalars():
        translations.setdefault(row.entity_id, {})[row.language_code] = row.content
    return translations


async def get_word_projection(
    session: AsyncSession, text: str, language: str
) -> dict[str, Any] | None:
    """
    Load a word with its senses, definitions, examples, audio and outgoing edges.

    Args:
        session: Database session
        text: Word text
        language: Language code

    Returns:
        Nested dict, or None if the word is not stored
    """
    result = await session.execute(
        select(Word)
        .where(Word.word == text, Word.language_code == language)
        .options(
            selectinload(Word.details)
            .selectinload(WordDetails.definition_links)
            .selectinload(WordDefinition.definition)
            .selectinload(Definition.examples),
            selectinload(Word.details)
            .selectinload(WordDetails.audio_links)
            .selectinload(WordDetailsAudio.audio),
        )
    )
    word = result.scalar_one_or_none()
    if word is None:
        return None

    details_ids = [details.id for details in word.details]
    word_edges = await session.execute(
        select(WordToWordRelationship)
        .where(WordToWordRelationship.from_word_id == word.id)
        .options(selectinload(WordToWordRelationship.to_word))
        .order_by(WordToWordRelationship.order_index, WordToWordRelationship.to_word_id)
    )
    details_edges = await session.execute(
        select(WordDetailsRelationship)
        .where(WordDetailsRelationship.from_word_details_id.in_(details_ids))
        .options(
            selectinload(WordDetailsRelationship.to_details).selectinload(WordDetails.word)
        )
        .order_by(WordDetailsRelationship.order_index)
    )
    edges_by_details: dict[int, list[dict[str, Any]]] = {}
    for edge in details_edges.scalars():
        edges_by_details.setdefault(edge.from_word_details_id, []).append(
            {
                "type": edge.type,
                "description": edge.description,
                "word": edge.to_details.word.word,
                "part_of_speech": edge.to_details.part_of_speech,
                "variant": edge.to_details.variant,
            }
        )

    definition_ids = [
        link.definition_id for details in word.details for link in details.definition_links
    ]
    example_ids = [
        example.id
        for details in word.details
        for link in details.definition_links
        for example in link.definition.examples
    ]
    definition_translations = await _translations(session, "definition", definition_ids)
    example_translations = await _translations(session, "example", example_ids)

    return {
        "id": word.id,
        "word": word.word,
        "language": word.language_code,
        "etymology": word.etymology,
        "phonetic": word.phonetic_general,
        "frequency": word.frequency_general,
        "is_highlighted": word.is_highlighted,
        "source_entity_id": word.source_entity_id,
        "details": [
            {
                "id": details.id,
                "part_of_speech": details.part_of_speech,
                "variant": details.variant,
                "gender": details.gender,
                "phonetic": details.phonetic,
                "forms": details.forms,
                "etymology": details.etymology,
                "frequency": details.frequency,
                "is_plural": details.is_plural,
                "source": details.source,
                "definitions": [
                    {
                        "id": link.definition.id,
                        "definition": link.definition.definition,
                        "is_primary": link.is_primary,
                        "is_in_short_def": link.definition.is_in_short_def,
                        "subject_status_labels": link.definition.subject_status_labels,
                        "general_labels": link.definition.general_labels,
                        "grammatical_note": link.definition.grammatical_note,
                        "usage_note": link.definition.usage_note,
                        "translations": definition_translations.get(link.definition.id, {}),
                        "examples": [
                            {
                                "example": example.example,
                                "grammatical_note": example.grammatical_note,
                                "source": example.source_of_example,
                                "translations": example_translations.get(example.id, {}),
                            }
                            for example in link.definition.examples
                        ],
                    }
                    for link in sorted(details.definition_links, key=lambda l: l.definition_id)
                ],
                "audio": [
                    {"url": link.audio.url, "is_primary": link.is_primary}
                    for link in sorted(
                        details.audio_links, key=lambda l: (not l.is_primary, l.audio_id)
                    )
                ],
                "relationships": edges_by_details.get(details.id, []),
            }
            for details in word.details
        ],
        "relationships": [
            {
                "type": edge.type,
                "description": edge.description,
                "word": edge.to_word.word,
            }
            for edge in word_edges.scalars()
        ],
    }
