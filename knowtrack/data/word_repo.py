from __future__ import annotations

from typing import Any, Dict, List

from knowtrack.data._rows import convert_rows, parse_ts, require_ts, utc_now_iso
from knowtrack.db.store import StoreClient
from knowtrack.models.word import UNMASTERED, Word, WordDraft


def _to_word(r: Dict[str, Any]) -> Word:
    return Word(
        id=r["id"],
        word=r["word"],
        definition=r.get("definition") or "",
        notes=r.get("notes") or "",
        status=r.get("status") or UNMASTERED,
        created_at=require_ts(r.get("created_at"), "created_at"),
        updated_at=parse_ts(r.get("updated_at")),
    )


class WordRepo:
    TABLE = "words"

    def __init__(self, store: StoreClient):
        self.store = store

    def list_words(self) -> List[Word]:
        return convert_rows(self.TABLE, self.store.list(self.TABLE), _to_word)

    def create(self, draft: WordDraft, access_token: str | None = None) -> Word:
        row = self.store.insert(
            self.TABLE,
            {"word": draft.word, "definition": draft.definition, "notes": draft.notes, "status": UNMASTERED},
            access_token=access_token,
        )
        return convert_rows(self.TABLE, [row], _to_word)[0]

    def update_status(self, word_id: int, status: str, access_token: str | None = None) -> None:
        self.store.update(self.TABLE, word_id, {"status": status, "updated_at": utc_now_iso()}, access_token=access_token)

    def update_fields(self, word_id: int, draft: WordDraft, access_token: str | None = None) -> None:
        self.store.update(
            self.TABLE,
            word_id,
            {"word": draft.word, "definition": draft.definition, "notes": draft.notes, "updated_at": utc_now_iso()},
            access_token=access_token,
        )

    def delete(self, word_id: int, access_token: str | None = None) -> None:
        self.store.delete(self.TABLE, word_id, access_token=access_token)
