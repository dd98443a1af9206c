"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import lexigraph.models  # noqa: F401
from lexigraph.database import Base
from lexigraph.services.audio.downloader import DownloadResult
from lexigraph.services.enrichment.context import IngestionContext
from lexigraph.services.enrichment.frequency import FrequencyData


class FakeFrequencyClient:
    """Frequency collaborator answering from a dict and recording calls."""

    def __init__(self, data: dict[str, FrequencyData] | None = None) -> None:
        self.data = data or {}
        self.calls: list[tuple[str, str]] = []

    async def get_frequency(self, word: str, language: str) -> FrequencyData | None:
        self.calls.append((word, language))
        return self.data.get(word)


class FakeDownloader:
    """Audio collaborator that "stores" every URL under a local prefix."""

    def __init__(self, fail: set[str] | None = None) -> None:
        self.fail = fail or set()
        self.calls: list[str] = []

    async def download_many(self, urls, metadata=None) -> dict[str, DownloadResult]:
        results = {}
        for url in dict.fromkeys(urls):
            self.calls.append(url)
            if url in self.fail:
                results[url] = DownloadResult(success=False, original_url=url, error="HTTP 404")
            else:
                local = f"data/audio/{url.rsplit('/', 1)[-1]}"
                results[url] = DownloadResult(success=True, original_url=url, local_url=local)
        return results


@pytest.fixture
async def async_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def frequency_client() -> FakeFrequencyClient:
    return FakeFrequencyClient(
        {
            "hus": FrequencyData(
                word="hus", language="da", general=120, by_part_of_speech={"noun": 95}
            ),
        }
    )


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture
def context_factory(frequency_client, downloader):
    """Fresh IngestionContext per ingestion, wired to the fake collaborators."""

    def factory() -> IngestionContext:
        return IngestionContext(frequency_client=frequency_client, downloader=downloader)

    return factory


@pytest.fixture
def hus_entry() -> dict[str, Any]:
    """Minimal Danish noun entry."""
    return {
        "word": {
            "word": "hus",
            "partOfSpeech": ["substantiv"],
            "forms": ["-et", "-e", "-ene"],
        },
    }


@pytest.fixture
def danish_entry() -> dict[str, Any]:
    """Danish noun entry exercising definitions, labels, audio and relations."""
    return {
        "word": {
            "word": "bil",
            "partOfSpeech": ["substantiv", "fælleskøn"],
            "forms": ["-en", "-er", "-erne"],
            "phonetic": "[ˈbiˀl]",
            "etymology": "forkortelse af automobil",
            "audio": [
                {"word": "", "audio_url": "https://static.ordnet.dk/mp3/11005/11005171_1.mp3"},
                {
                    "word": "grundform",
                    "audio_url": "https://static.ordnet.dk/mp3/11005/11005171_2.mp3",
                    "phonetic_audio": "[ˈbiˀl]",
                },
                {
                    "word": "i sammensætning",
                    "audio_url": "https://static.ordnet.dk/mp3/11005/11005171_3.mp3",
                },
                {
                    "word": "pluralis",
                    "audio_url": "https://static.ordnet.dk/mp3/11005/11005171_4.mp3",
                },
            ],
        },
        "definition": [
            {
                "definition": "motorkøretøj med fire hjul",
                "examples": ["han kørte bil til arbejde"],
                "sources": [{"short": "Politiken", "full": "Politiken 2004"}],
                "labels": {
                    "Synonym": "automobil",
                    "Se også": ["lastbil"],
                    "Eksempler": ["en ny bil"],
                },
            },
            {"definition": "se"},
        ],
        "synonyms": ["automobil", "vogn"],
        "antonyms": [],
        "stems": [{"stem": "køre", "partOfSpeech": "vb."}],
        "compositions": [{"composition": "bil(s)tur"}],
        "fixed_expressions": [
            {
                "expression": "sidde i bilen",
                "definition": "være på vej",
                "expression_variants": ["sidde i vognen"],
            }
        ],
    }


@pytest.fixture
def merriam_entry() -> dict[str, Any]:
    """Merriam-Webster learner's entry for a verb."""
    return {
        "meta": {
            "id": "run:1",
            "uuid": "b7b7",
            "src": "learners",
            "highlight": "yes",
            "stems": ["run", "ran", "running", "runs"],
            "syns": [["sprint", "dash"]],
            "ants": [["walk"]],
            "app-shortdef": {"def": ["{bc} to go faster than a walk"]},
        },
        "hwi": {
            "hw": "run",
            "prs": [{"ipa": "ˈrʌn", "sound": {"audio": "run00001"}}],
        },
        "fl": "verb",
        "ins": [
            {"if": "ran", "il": "past"},
            {"if": "run"},
            {"if": "run*ning"},
            {"if": "runs"},
        ],
        "def": [
            {
                "sseq": [
                    [
                        [
                            "sense",
                            {
                                "sn": "1",
                                "sls": ["always used"],
                                "dt": [
                                    ["text", "{bc} to go faster than a walk"],
                                    ["vis", [{"t": "The children {it}ran{/it} home."}]],
                                ],
                            },
                        ]
                    ]
                ]
            }
        ],
        "dros": [
            {
                "drp": "run out",
                "gram": "phrasal verb",
                "def": [
                    {
                        "sseq": [
                            [
                                [
                                    "sense",
                                    {
                                        "dt": [["text", "{bc} to use up something"]],
                                        "phrasev": [{"pva": "run out of*"}],
                                    },
                                ]
                            ]
                        ]
                    }
                ],
            }
        ],
        "uros": [{"ure": "run*ner", "fl": "noun"}],
        "et": [["text", "Middle English {it}rinnen{/it}"]],
    }


@pytest.fixture
def temp_audio_dir(tmp_path: Path) -> Path:
    """Create a temporary audio directory."""
    audio_dir = tmp_path / "audio"
    audio_dir.mkdir()
    return audio_dir
