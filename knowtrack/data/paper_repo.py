from __future__ import annotations

from typing import Any, Dict, List

from knowtrack.data._rows import convert_rows, parse_ts, require_ts, utc_now_iso
from knowtrack.db.store import StoreClient
from knowtrack.models.paper import UNREAD, Paper, PaperDraft


def _to_paper(r: Dict[str, Any]) -> Paper:
    return Paper(
        id=r["id"],
        title=r["title"],
        link=r.get("link") or "",
        note=r.get("note") or "",
        status=r.get("status") or UNREAD,
        tags=tuple(r.get("tags") or ()),
        created_at=require_ts(r.get("created_at"), "created_at"),
        updated_at=parse_ts(r.get("updated_at")),
    )


class PaperRepo:
    TABLE = "papers"

    def __init__(self, store: StoreClient):
        self.store = store

    def list_papers(self) -> List[Paper]:
        return convert_rows(self.TABLE, self.store.list(self.TABLE), _to_paper)

    def create(self, draft: PaperDraft, access_token: str | None = None) -> Paper:
        row = self.store.insert(
            self.TABLE,
            {"title": draft.title, "link": draft.link, "note": draft.note, "tags": list(draft.tags), "status": UNREAD},
            access_token=access_token,
        )
        return convert_rows(self.TABLE, [row], _to_paper)[0]

    def update_status(self, paper_id: int, status: str, access_token: str | None = None) -> None:
        self.store.update(self.TABLE, paper_id, {"status": status, "updated_at": utc_now_iso()}, access_token=access_token)

    def update_fields(self, paper_id: int, draft: PaperDraft, access_token: str | None = None) -> None:
        self.store.update(
            self.TABLE,
            paper_id,
            {
                "title": draft.title,
                "link": draft.link,
                "note": draft.note,
                "tags": list(draft.tags),
                "updated_at": utc_now_iso(),
            },
            access_token=access_token,
        )

    def delete(self, paper_id: int, access_token: str | None = None) -> None:
        self.store.delete(self.TABLE, paper_id, access_token=access_token)
