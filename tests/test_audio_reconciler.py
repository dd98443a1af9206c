"""Tests for audio chain selection and primary-link reconciliation."""

import pytest
from sqlalchemy import func, select

from lexigraph.models import Audio, Word, WordDetails, WordDetailsAudio
from lexigraph.services.audio.reconciler import AudioReconciler, select_audio_chain


class TestSelectAudioChain:
    """Tests for select_audio_chain."""

    def test_chain_from_base_form(self):
        """Should start at grundform and continue over untagged entries."""
        entries = [
            {"word": "", "audio_url": "0"},
            {"word": "grundform", "audio_url": "1"},
            {"word": "i sammensætning", "audio_url": "2"},
            {"word": "", "audio_url": "3"},
            {"word": "pluralis", "audio_url": "4"},
            {"word": "", "audio_url": "5"},
        ]
        assert [e["audio_url"] for e in select_audio_chain(entries)] == ["1", "2", "3"]

    def test_later_base_form_restarts(self):
        """Should restart the chain at a later grundform."""
        entries = [
            {"word": "grundform", "audio_url": "1"},
            {"word": "grundform", "audio_url": "2"},
            {"word": None, "audio_url": "3"},
        ]
        assert [e["audio_url"] for e in select_audio_chain(entries)] == ["2", "3"]

    def test_no_base_form(self):
        """Should return nothing without a grundform entry."""
        assert select_audio_chain([{"word": "", "audio_url": "1"}]) == []
        assert select_audio_chain([]) == []


async def _details(session) -> WordDetails:
    word = Word(word="bil", language_code="da")
    session.add(word)
    await session.flush()
    details = WordDetails(word_id=word.id, part_of_speech="noun", source="danish_dictionary")
    session.add(details)
    await session.flush()
    return details


async def _links(session, details_id) -> dict[str, bool]:
    result = await session.execute(
        select(Audio.url, WordDetailsAudio.is_primary)
        .join(Audio, Audio.id == WordDetailsAudio.audio_id)
        .where(WordDetailsAudio.word_details_id == details_id)
    )
    return dict(result.all())


class TestAudioReconciler:
    """Tests for AudioReconciler."""

    @pytest.mark.asyncio
    async def test_primary_and_secondary(self, async_session):
        """Should link the first URL as primary and the next as secondary."""
        details = await _details(async_session)
        result = await AudioReconciler(async_session).reconcile(
            details, ["a.mp3", "b.mp3", "c.mp3"], "da", "danish_dictionary"
        )

        assert result.primary.url == "a.mp3"
        assert result.secondary.url == "b.mp3"
        assert await _links(async_session, details.id) == {"a.mp3": True, "b.mp3": False}

    @pytest.mark.asyncio
    async def test_single_primary_after_change(self, async_session):
        """Should demote the old primary when a new one arrives."""
        details = await _details(async_session)
        reconciler = AudioReconciler(async_session)
        await reconciler.reconcile(details, ["a.mp3"], "da", "danish_dictionary")
        await reconciler.reconcile(details, ["b.mp3"], "da", "danish_dictionary")

        links = await _links(async_session, details.id)
        assert links == {"a.mp3": False, "b.mp3": True}
        assert sum(links.values()) == 1

    @pytest.mark.asyncio
    async def test_secondary_replaced(self, async_session):
        """Should keep only one non-primary link."""
        details = await _details(async_session)
        reconciler = AudioReconciler(async_session)
        await reconciler.reconcile(details, ["a.mp3", "b.mp3"], "da", "danish_dictionary")
        result = await reconciler.reconcile(details, ["a.mp3", "c.mp3"], "da", "danish_dictionary")

        assert result.removed_links == 1
        assert await _links(async_session, details.id) == {"a.mp3": True, "c.mp3": False}

    @pytest.mark.asyncio
    async def test_idempotent(self, async_session):
        """Should not create duplicate rows on repeat."""
        details = await _details(async_session)
        reconciler = AudioReconciler(async_session)
        for _ in range(2):
            await reconciler.reconcile(details, ["a.mp3", "a.mp3", "b.mp3"], "da", "danish_dictionary")

        audio_count = await async_session.scalar(select(func.count()).select_from(Audio))
        link_count = await async_session.scalar(select(func.count()).select_from(WordDetailsAudio))
        assert audio_count == 2
        assert link_count == 2

    @pytest.mark.asyncio
    async def test_without_primary(self, async_session):
        """Should only add a secondary when the first URL is not primary."""
        details = await _details(async_session)
        result = await AudioReconciler(async_session).reconcile(
            details, ["a.mp3"], "da", "danish_dictionary", first_is_primary=False
        )
        assert result.primary is None
        assert await _links(async_session, details.id) == {"a.mp3": False}

    @pytest.mark.asyncio
    async def test_empty(self, async_session):
        """Should do nothing without URLs."""
        details = await _details(async_session)
        result = await AudioReconciler(async_session).reconcile(details, [], "da", "user")
        assert result.primary is None and result.secondary is None
