from __future__ import annotations
from urllib.parse import urlencode

from fastapi import APIRouter, Request, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from knowtrack.errors import KnowtrackError, NotFoundError, StoreError, ValidationError
from knowtrack.models.word import MASTERED
from knowtrack.service import selectors
from knowtrack.service.filters import WordFilter
from knowtrack.service.word_service import make_word_draft
from knowtrack.web.dependencies import error_status, get_access_token, get_services, is_view_activation
from knowtrack.web.templating import templates

router = APIRouter()


def _list_url(status: str = "all", q: str = "") -> str:
    params = {"status": status or "all"}
    if q:
        params["q"] = q
    return "/words?" + urlencode(params)


def _render(request: Request, flt: WordFilter, editing=None, error: str | None = None, status_code: int = 200):
    cache = get_services(request).word_cache
    words = cache.snapshot
    return templates.TemplateResponse(
        request,
        "words.html",
        {
            "signed_in": bool(get_access_token(request)),
            "load_state": cache.state.value,
            "words": flt.apply(words),
            "filter": flt,
            "counts": selectors.status_counts(words, MASTERED),
            "recent": selectors.recent_activity(words),
            "editing": editing,
            "error": error or cache.error,
        },
        status_code=status_code,
    )


@router.get("/words", response_class=HTMLResponse)
def words_page(request: Request, status: str | None = None, q: str | None = None, edit: int | None = None):
    services = get_services(request)
    if is_view_activation(request):
        services.word_cache.activate()
    else:
        services.word_cache.ensure_loaded()
    flt = WordFilter.from_params(status, q)
    editing = services.words.begin_edit(edit) if edit is not None else None
    if edit is not None and editing is None:
        return _render(request, flt, error=f"Word {edit} not found.", status_code=404)
    return _render(request, flt, editing=editing)


@router.post("/words")
def add_word(request: Request, word: str = Form(""), definition: str = Form(""), notes: str = Form("")):
    services = get_services(request)
    try:
        services.words.add(make_word_draft(word, definition, notes), access_token=get_access_token(request))
    except (ValidationError, StoreError) as e:
        return _render(request, WordFilter(), error=str(e), status_code=error_status(e))
    return RedirectResponse(url=_list_url(), status_code=303)


@router.post("/words/{word_id}/toggle")
def toggle_word(request: Request, word_id: int, status: str = Form("all"), q: str = Form("")):
    services = get_services(request)
    try:
        services.words.toggle_status(word_id, access_token=get_access_token(request))
    except (NotFoundError, StoreError) as e:
        return _render(request, WordFilter.from_params(status, q), error=str(e), status_code=error_status(e))
    return RedirectResponse(url=_list_url(status, q), status_code=303)


@router.post("/words/{word_id}/edit")
def save_word(
    request: Request,
    word_id: int,
    word: str = Form(""),
    definition: str = Form(""),
    notes: str = Form(""),
    status: str = Form("all"),
    q: str = Form(""),
):
    services = get_services(request)
    try:
        services.words.save_edit(word_id, make_word_draft(word, definition, notes), access_token=get_access_token(request))
    except KnowtrackError as e:
        editing = services.words.begin_edit(word_id)
        return _render(request, WordFilter.from_params(status, q), editing=editing, error=str(e), status_code=error_status(e))
    return RedirectResponse(url=_list_url(status, q), status_code=303)


@router.get("/words/{word_id}/delete", response_class=HTMLResponse)
def confirm_delete_word(request: Request, word_id: int):
    services = get_services(request)
    services.word_cache.ensure_loaded()
    word = services.words.begin_edit(word_id)
    if word is None:
        return _render(request, WordFilter(), error=f"Word {word_id} not found.", status_code=404)
    return templates.TemplateResponse(
        request,
        "confirm_delete.html",
        {
            "signed_in": bool(get_access_token(request)),
            "kind": "word",
            "label": word.word,
            "action": f"/words/{word_id}/delete",
            "back": _list_url(),
        },
    )


@router.post("/words/{word_id}/delete")
def delete_word(request: Request, word_id: int, confirm: str = Form("")):
    services = get_services(request)
    try:
        services.words.delete(word_id, confirmed=confirm == "yes", access_token=get_access_token(request))
    except StoreError as e:
        return _render(request, WordFilter(), error=str(e), status_code=error_status(e))
    return RedirectResponse(url=_list_url(), status_code=303)
