"""Link mirrored audio to senses while keeping at most one primary per sense."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lexigraph.models import Audio, WordDetails, WordDetailsAudio

logger = logging.getLogger(__name__)

BASE_FORM_TAG = "grundform"
CHAIN_CONTINUATION_TAGS = frozenset({"", "i sammensætning"})


def select_audio_chain(entries: Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Pick the run of audio entries that belongs to the base form.

    The run starts at a ``grundform`` entry and continues over untagged and
    ``i sammensætning`` entries. A later ``grundform`` starts the run over;
    any other tag ends the scan once a run exists.
    """
    chain: list[Mapping[str, Any]] = []
    for entry in entries:
        tag = (entry.get("word") or "").strip()
        if tag == BASE_FORM_TAG:
            chain = [entry]
        elif chain and tag in CHAIN_CONTINUATION_TAGS:
            chain.append(entry)
        elif chain:
            break
    return chain


@dataclass
class ReconcileResult:
    primary: Audio | None = None
    secondary: Audio | None = None
    removed_links: int = 0


async def upsert_audio(session: AsyncSession, url: str, language: str, source: str) -> Audio:
    """Return the Audio row for (url, language), creating it if needed."""
    result = await session.execute(
        select(Audio).where(Audio.url == url, Audio.language_code == language)
    )
    audio = result.scalar_one_or_none()
    if audio is None:
        audio = Audio(url=url, language_code=language, source=source)
        session.add(audio)
        await session.flush()
    return audio


class AudioReconciler:
    """Maintain the audio links of one WordDetails row.

    The designated primary (the first URL when ``first_is_primary``) becomes
    the only primary link. The next distinct URL becomes the single
    non-primary link, replacing earlier non-primary links. Further URLs are
    ignored.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _link(self, details_id: int, audio_id: int) -> WordDetailsAudio | None:
        result = await self.session.execute(
            select(WordDetailsAudio).where(
                WordDetailsAudio.word_details_id == details_id,
                WordDetailsAudio.audio_id == audio_id,
            )
        )
        return result.scalar_one_or_none()

    async def _set_primary(self, details_id: int, audio: Audio) -> None:
        await self.session.execute(
            update(WordDetailsAudio)
            .where(
                WordDetailsAudio.word_details_id == details_id,
                WordDetailsAudio.audio_id != audio.id,
                WordDetailsAudio.is_primary.is_(True),
            )
            .values(is_primary=False)
            .execution_options(synchronize_session="fetch")
        )
        link = await self._link(details_id, audio.id)
        if link is None:
            self.session.add(
                WordDetailsAudio(word_details_id=details_id, audio_id=audio.id, is_primary=True)
            )
        else:
            link.is_primary = True
        await self.session.flush()

    async def _set_secondary(self, details_id: int, audio: Audio, keep: set[int]) -> int:
        result = await self.session.execute(
            delete(WordDetailsAudio)
            .where(
                WordDetailsAudio.word_details_id == details_id,
                WordDetailsAudio.is_primary.is_(False),
                WordDetailsAudio.audio_id.not_in(keep | {audio.id}),
            )
            .execution_options(synchronize_session="fetch")
        )
        removed = result.rowcount or 0
        if await self._link(details_id, audio.id) is None:
            self.session.add(
                WordDetailsAudio(word_details_id=details_id, audio_id=audio.id, is_primary=False)
            )
        await self.session.flush()
        return removed

    async def reconcile(
        self,
        details: WordDetails,
        urls: Sequence[str],
        language: str,
        source: str,
        first_is_primary: bool = True,
    ) -> ReconcileResult:
        """
        Upsert audio rows for ``urls`` and link them to ``details``.

        Args:
            details: Flushed WordDetails row
            urls: Stored audio URLs in source order
            language: Language code of the audio
            source: Provenance recorded on new Audio rows
            first_is_primary: Promote the first URL to primary

        Returns:
            ReconcileResult with the linked rows
        """
        distinct = list(dict.fromkeys(u for u in urls if u))
        result = ReconcileResult()
        if not distinct:
            return result

        keep: set[int] = set()
        remaining = distinct
        if first_is_primary:
            result.primary = await upsert_audio(self.session, distinct[0], language, source)
            await self._set_primary(details.id, result.primary)
            keep.add(result.primary.id)
            remaining = distinct[1:]

        if remaining:
            result.secondary = await upsert_audio(self.session, remaining[0], language, source)
            if result.secondary.id not in keep:
                result.removed_links = await self._set_secondary(
                    details.id, result.secondary, keep
                )
            if len(remaining) > 1:
                logger.debug(
                    f"Ignoring {len(remaining) - 1} extra audio file(s) for details {details.id}"
                )
        return result
