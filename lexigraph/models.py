"""SQLAlchemy ORM models for the lexical graph."""

from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lexigraph.database import Base


def _utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(timezone.utc)


class Word(Base):
    """A spelling in one language."""

    __tablename__ = "words"
    __table_args__ = (UniqueConstraint("word", "language_code", name="uq_word_language"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    word: Mapped[str] = mapped_column(Text, index=True)
    language_code: Mapped[str] = mapped_column(Text)
    phonetic_general: Mapped[str | None] = mapped_column(Text, nullable=True)
    frequency_general: Mapped[int | None] = mapped_column(nullable=True)
    is_highlighted: Mapped[bool] = mapped_column(default=False)
    etymology: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_entity_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=_utc_now, onupdate=_utc_now)

    # Relationships
    details: Mapped[list["WordDetails"]] = relationship(
        back_populates="word",
        cascade="all, delete-orphan",
        order_by="WordDetails.id",
    )


class WordDetails(Base):
    """A sense of a word scoped by part of speech and variant label."""

    __tablename__ = "word_details"
    __table_args__ = (
        UniqueConstraint("word_id", "part_of_speech", "variant", name="uq_word_details_sense"),
        Index("ix_word_details_word_pos", "word_id", "part_of_speech"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    word_id: Mapped[int] = mapped_column(ForeignKey("words.id", ondelete="CASCADE"))
    part_of_speech: Mapped[str] = mapped_column(Text)  # PartOfSpeech value
    variant: Mapped[str] = mapped_column(Text, default="")
    gender: Mapped[str | None] = mapped_column(Text, nullable=True)  # common/neuter/...
    phonetic: Mapped[str | None] = mapped_column(Text, nullable=True)
    forms: Mapped[str | None] = mapped_column(Text, nullable=True)
    etymology: Mapped[str | None] = mapped_column(Text, nullable=True)
    frequency: Mapped[int | None] = mapped_column(nullable=True)
    is_plural: Mapped[bool] = mapped_column(default=False)
    source: Mapped[str] = mapped_column(Text)  # SourceType value
    created_at: Mapped[datetime] = mapped_column(default=_utc_now)

    # Relationships
    word: Mapped["Word"] = relationship(back_populates="details")
    definition_links: Mapped[list["WordDefinition"]] = relationship(
        back_populates="word_details",
        cascade="all, delete-orphan",
    )
    audio_links: Mapped[list["WordDetailsAudio"]] = relationship(
        back_populates="word_details",
        cascade="all, delete-orphan",
    )


class Definition(Base):
    """A meaning, shared by every sense that links to it."""

    __tablename__ = "definitions"
    __table_args__ = (
        UniqueConstraint("definition", "language_code", "source", name="uq_definition_text"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    definition: Mapped[str] = mapped_column(Text)
    language_code: Mapped[str] = mapped_column(Text)
    source: Mapped[str] = mapped_column(Text)
    subject_status_labels: Mapped[str | None] = mapped_column(Text, nullable=True)
    general_labels: Mapped[str | None] = mapped_column(Text, nullable=True)
    grammatical_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    usage_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_in_short_def: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=_utc_now, onupdate=_utc_now)

    # Relationships
    examples: Mapped[list["DefinitionExample"]] = relationship(
        back_populates="definition",
        cascade="all, delete-orphan",
        order_by="DefinitionExample.id",
    )


class WordDefinition(Base):
    """Link between a sense and one of its definitions."""

    __tablename__ = "word_definitions"

    word_details_id: Mapped[int] = mapped_column(
        ForeignKey("word_details.id", ondelete="CASCADE"), primary_key=True
    )
    definition_id: Mapped[int] = mapped_column(
        ForeignKey("definitions.id", ondelete="CASCADE"), primary_key=True
    )
    is_primary: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=_utc_now)

    # Relationships
    word_details: Mapped["WordDetails"] = relationship(back_populates="definition_links")
    definition: Mapped["Definition"] = relationship()


class DefinitionExample(Base):
    """Example sentence for a definition."""

    __tablename__ = "definition_examples"
    __table_args__ = (UniqueConstraint("definition_id", "example", name="uq_example_text"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    definition_id: Mapped[int] = mapped_column(ForeignKey("definitions.id", ondelete="CASCADE"))
    example: Mapped[str] = mapped_column(Text)
    language_code: Mapped[str] = mapped_column(Text)
    grammatical_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_of_example: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_utc_now)

    # Relationships
    definition: Mapped["Definition"] = relationship(back_populates="examples")


class Audio(Base):
    """A playable pronunciation asset."""

    __tablename__ = "audio"
    __table_args__ = (UniqueConstraint("url", "language_code", name="uq_audio_url"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    url: Mapped[str] = mapped_column(Text)
    language_code: Mapped[str] = mapped_column(Text)
    source: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(default=_utc_now)


class WordDetailsAudio(Base):
    """Link between a sense and an audio file. At most one link per sense is primary."""

    __tablename__ = "word_details_audio"

    word_details_id: Mapped[int] = mapped_column(
        ForeignKey("word_details.id", ondelete="CASCADE"), primary_key=True
    )
    audio_id: Mapped[int] = mapped_column(
        ForeignKey("audio.id", ondelete="CASCADE"), primary_key=True
    )
    is_primary: Mapped[bool] = mapped_column(default=False)

    # Relationships
    word_details: Mapped["WordDetails"] = relationship(back_populates="audio_links")
    audio: Mapped["Audio"] = relationship()


class WordToWordRelationship(Base):
    """Coarse edge between two words (related, stem, composition, ...)."""

    __tablename__ = "word_to_word_relationships"

    from_word_id: Mapped[int] = mapped_column(
        ForeignKey("words.id", ondelete="CASCADE"), primary_key=True
    )
    to_word_id: Mapped[int] = mapped_column(
        ForeignKey("words.id", ondelete="CASCADE"), primary_key=True
    )
    type: Mapped[str] = mapped_column(Text, primary_key=True)  # RelationshipType value
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_utc_now)

    # Relationships
    from_word: Mapped["Word"] = relationship(foreign_keys=[from_word_id])
    to_word: Mapped["Word"] = relationship(foreign_keys=[to_word_id])


class WordDetailsRelationship(Base):
    """Sense-specific edge (plural form, past tense, synonym, ...)."""

    __tablename__ = "word_details_relationships"

    from_word_details_id: Mapped[int] = mapped_column(
        ForeignKey("word_details.id", ondelete="CASCADE"), primary_key=True
    )
    to_word_details_id: Mapped[int] = mapped_column(
        ForeignKey("word_details.id", ondelete="CASCADE"), primary_key=True
    )
    type: Mapped[str] = mapped_column(Text, primary_key=True)  # RelationshipType value
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_utc_now)

    # Relationships
    from_details: Mapped["WordDetails"] = relationship(foreign_keys=[from_word_details_id])
    to_details: Mapped["WordDetails"] = relationship(foreign_keys=[to_word_details_id])


class Translation(Base):
    """Translated content for a definition or example."""

    __tablename__ = "translations"
    __table_args__ = (
        UniqueConstraint("entity_type", "entity_id", "language_code", name="uq_translation"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    entity_type: Mapped[str] = mapped_column(Text)  # "definition" or "example"
    entity_id: Mapped[int] = mapped_column()
    language_code: Mapped[str] = mapped_column(Text)
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(default=_utc_now)
