from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from knowtrack.models.paper import PAPER_STATUSES, Paper
from knowtrack.models.word import WORD_STATUSES, Word

ALL = "all"


def _norm_status(value: str | None, allowed: tuple) -> str:
    value = (value or ALL).strip().lower()
    return value if value in allowed else ALL


@dataclass(frozen=True)
class PaperFilter:
    status: str = ALL
    tag: Optional[str] = None
    query: str = ""

    @classmethod
    def from_params(cls, status: str | None = None, tag: str | None = None, q: str | None = None) -> "PaperFilter":
        return cls(status=_norm_status(status, PAPER_STATUSES), tag=(tag or "").strip() or None, query=(q or "").strip())

    @property
    def is_default(self) -> bool:
        return self.status == ALL and self.tag is None and not self.query

    def matches(self, paper: Paper) -> bool:
        if self.status != ALL and paper.status != self.status:
            return False
        if self.tag is not None and self.tag not in paper.tags:
            return False
        if self.query and self.query.lower() not in paper.title.lower():
            return False
        return True

    def apply(self, papers: Iterable[Paper]) -> List[Paper]:
        return [p for p in papers if self.matches(p)]


@dataclass(frozen=True)
class WordFilter:
    status: str = ALL
    query: str = ""

    @classmethod
    def from_params(cls, status: str | None = None, q: str | None = None) -> "WordFilter":
        return cls(status=_norm_status(status, WORD_STATUSES), query=(q or "").strip())

    @property
    def is_default(self) -> bool:
        return self.status == ALL and not self.query

    def matches(self, word: Word) -> bool:
        if self.status != ALL and word.status != self.status:
            return False
        if self.query:
            needle = self.query.lower()
            return needle in word.word.lower() or needle in word.definition.lower()
        return True

    def apply(self, words: Iterable[Word]) -> List[Word]:
        return [w for w in words if self.matches(w)]
