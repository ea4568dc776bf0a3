from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

UNMASTERED = "unmastered"
MASTERED = "mastered"
WORD_STATUSES = (UNMASTERED, MASTERED)


@dataclass(frozen=True)
class Word:
    id: int
    word: str
    definition: str
    notes: str
    status: str
    created_at: datetime
    updated_at: datetime | None

    @property
    def is_mastered(self) -> bool:
        return self.status == MASTERED


@dataclass(frozen=True)
class WordDraft:
    word: str
    definition: str = ""
    notes: str = ""
