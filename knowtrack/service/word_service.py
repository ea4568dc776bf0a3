from __future__ import annotations

import logging
from typing import Optional

from knowtrack.data.word_repo import WordRepo
from knowtrack.errors import NotFoundError, ValidationError
from knowtrack.models.word import MASTERED, UNMASTERED, Word, WordDraft
from knowtrack.service.collection import CollectionCache

logger = logging.getLogger(__name__)


def make_word_draft(word: str, definition: str = "", notes: str = "") -> WordDraft:
    return WordDraft(word=word.strip(), definition=definition.strip(), notes=notes.strip())


class WordService:
    def __init__(self, repo: WordRepo, cache: CollectionCache[Word]):
        self.repo = repo
        self.cache = cache

    @staticmethod
    def _validate(draft: WordDraft) -> None:
        if not draft.word:
            raise ValidationError("Word cannot be empty.")

    def _require(self, word_id: int) -> Word:
        word = self.cache.find(lambda w: w.id == word_id)
        if word is None:
            raise NotFoundError(f"Word {word_id} not found.")
        return word

    def add(self, draft: WordDraft, access_token: str | None = None) -> Word:
        self._validate(draft)
        created = self.repo.create(draft, access_token=access_token)
        logger.info("added word %s (%r)", created.id, created.word)
        self.cache.refresh()
        return created

    def toggle_status(self, word_id: int, access_token: str | None = None) -> str:
        word = self._require(word_id)
        new_status = UNMASTERED if word.status == MASTERED else MASTERED
        self.repo.update_status(word_id, new_status, access_token=access_token)
        logger.info("word %s marked %s", word_id, new_status)
        self.cache.refresh()
        return new_status

    def begin_edit(self, word_id: int) -> Optional[Word]:
        return self.cache.find(lambda w: w.id == word_id)

    def save_edit(self, word_id: int, draft: WordDraft, access_token: str | None = None) -> None:
        self._validate(draft)
        self._require(word_id)
        self.repo.update_fields(word_id, draft, access_token=access_token)
        logger.info("edited word %s", word_id)
        self.cache.refresh()

    def delete(self, word_id: int, confirmed: bool, access_token: str | None = None) -> bool:
        if not confirmed:
            return False
        self.repo.delete(word_id, access_token=access_token)
        logger.info("deleted word %s", word_id)
        self.cache.refresh()
        return True
