from __future__ import annotations

import logging
from typing import Optional, Tuple

from knowtrack.data.paper_repo import PaperRepo
from knowtrack.errors import NotFoundError, ValidationError
from knowtrack.models.paper import READ, UNREAD, Paper, PaperDraft
from knowtrack.service.collection import CollectionCache

logger = logging.getLogger(__name__)


def parse_tags(raw: str) -> Tuple[str, ...]:
    """Split comma-separated tag input. Order and repeats are kept."""
    return tuple(t.strip() for t in raw.split(",") if t.strip())


def make_paper_draft(title: str, link: str = "", note: str = "", tags: str = "") -> PaperDraft:
    return PaperDraft(title=title.strip(), link=link.strip(), note=note.strip(), tags=parse_tags(tags))


class PaperService:
    """Mutations for the reading list.

    Every successful write is followed by a full reload of the cache; a
    failed write raises and leaves the cache as it was.
    """

    def __init__(self, repo: PaperRepo, cache: CollectionCache[Paper]):
        self.repo = repo
        self.cache = cache

    @staticmethod
    def _validate(draft: PaperDraft) -> None:
        if not draft.title:
            raise ValidationError("Title cannot be empty.")

    def _require(self, paper_id: int) -> Paper:
        paper = self.cache.find(lambda p: p.id == paper_id)
        if paper is None:
            raise NotFoundError(f"Paper {paper_id} not found.")
        return paper

    def add(self, draft: PaperDraft, access_token: str | None = None) -> Paper:
        self._validate(draft)
        created = self.repo.create(draft, access_token=access_token)
        logger.info("added paper %s (%r)", created.id, created.title)
        self.cache.refresh()
        return created

    def toggle_status(self, paper_id: int, access_token: str | None = None) -> str:
        paper = self._require(paper_id)
        new_status = UNREAD if paper.status == READ else READ
        self.repo.update_status(paper_id, new_status, access_token=access_token)
        logger.info("paper %s marked %s", paper_id, new_status)
        self.cache.refresh()
        return new_status

    def begin_edit(self, paper_id: int) -> Optional[Paper]:
        return self.cache.find(lambda p: p.id == paper_id)

    def save_edit(self, paper_id: int, draft: PaperDraft, access_token: str | None = None) -> None:
        self._validate(draft)
        self._require(paper_id)
        self.repo.update_fields(paper_id, draft, access_token=access_token)
        logger.info("edited paper %s", paper_id)
        self.cache.refresh()

    def delete(self, paper_id: int, confirmed: bool, access_token: str | None = None) -> bool:
        if not confirmed:
            return False
        self.repo.delete(paper_id, access_token=access_token)
        logger.info("deleted paper %s", paper_id)
        self.cache.refresh()
        return True
