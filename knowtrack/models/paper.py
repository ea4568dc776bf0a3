from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple

UNREAD = "unread"
READ = "read"
PAPER_STATUSES = (UNREAD, READ)


@dataclass(frozen=True)
class Paper:
    """A paper on the reading list.

    `tags` keeps the store's order; duplicates are kept as stored.
    """
    id: int
    title: str
    link: str
    note: str
    status: str
    tags: Tuple[str, ...]
    created_at: datetime
    updated_at: datetime | None

    @property
    def is_read(self) -> bool:
        return self.status == READ


@dataclass(frozen=True)
class PaperDraft:
    title: str
    link: str = ""
    note: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)
