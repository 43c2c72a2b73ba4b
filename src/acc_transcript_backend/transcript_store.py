"""
Read-only transcript store.

The store is built once at startup, either from the built-in fixture or from a
YAML/JSON fixture file, and is never written to afterwards. Iteration order is
load order, which callers treat as most-recent-first.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

from ruamel.yaml import YAML

from acc_transcript_backend.mock_data import MOCK_TRANSCRIPTS
from acc_transcript_backend.models.transcript import Transcript

logger = logging.getLogger(__name__)

yaml = YAML(typ="safe")


class TranscriptStore:
    """Immutable, ordered collection of transcripts."""

    def __init__(self, transcripts: Iterable[Transcript]):
        items = tuple(transcripts)
        seen = set()
        for transcript in items:
            if transcript.id in seen:
                raise ValueError(f"Duplicate transcript id: {transcript.id}")
            seen.add(transcript.id)
        self._transcripts: Tuple[Transcript, ...] = items

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "TranscriptStore":
        """Build a store from raw wire-shaped records."""
        return cls(Transcript.model_validate(record) for record in records)

    @classmethod
    def from_file(cls, path: str) -> "TranscriptStore":
        """
        Load transcripts from a YAML or JSON file.

        The file holds either a list of transcript records or a mapping with a
        ``transcripts`` key. JSON is read through the YAML loader.
        """
        fixture_path = Path(path)
        if not fixture_path.exists():
            raise FileNotFoundError(f"Transcript fixture not found: {fixture_path}")

        with open(fixture_path) as f:
            data = yaml.load(f) or []

        if isinstance(data, Mapping):
            data = data.get("transcripts", [])
        if not isinstance(data, list):
            raise ValueError(f"Transcript fixture {fixture_path} must contain a list of records")

        store = cls.from_records(data)
        logger.info(
            f"Loaded {len(store)} transcripts from {fixture_path} "
            f"(clients: {', '.join(store.client_names())})"
        )
        return store

    @classmethod
    def default(cls) -> "TranscriptStore":
        """Store backed by the built-in fixture."""
        return cls.from_records(MOCK_TRANSCRIPTS)

    def get(self, transcript_id: str) -> Optional[Transcript]:
        for transcript in self._transcripts:
            if transcript.id == transcript_id:
                return transcript
        return None

    def client_names(self) -> List[str]:
        """Distinct client names in store order."""
        names: List[str] = []
        for transcript in self._transcripts:
            if transcript.client_name not in names:
                names.append(transcript.client_name)
        return names

    def __iter__(self) -> Iterator[Transcript]:
        return iter(self._transcripts)

    def __len__(self) -> int:
        return len(self._transcripts)


def load_transcript_store(transcripts_file: Optional[str] = None) -> TranscriptStore:
    """Load the configured fixture, falling back to the built-in one."""
    if transcripts_file:
        return TranscriptStore.from_file(transcripts_file)
    logger.info("No transcripts_file configured - using built-in transcript fixture")
    return TranscriptStore.default()
