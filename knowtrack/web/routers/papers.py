from __future__ import annotations
from urllib.parse import urlencode

from fastapi import APIRouter, Request, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from knowtrack.errors import KnowtrackError, NotFoundError, StoreError, ValidationError
from knowtrack.models.paper import READ
from knowtrack.service import selectors
from knowtrack.service.filters import PaperFilter
from knowtrack.service.paper_service import make_paper_draft
from knowtrack.web.dependencies import error_status, get_access_token, get_services, is_view_activation
from knowtrack.web.templating import templates

router = APIRouter()


def _list_url(status: str = "all", tag: str = "", q: str = "") -> str:
    params = {"status": status or "all"}
    if tag:
        params["tag"] = tag
    if q:
        params["q"] = q
    return "/papers?" + urlencode(params)


def _render(request: Request, flt: PaperFilter, editing=None, error: str | None = None, status_code: int = 200):
    services = get_services(request)
    cache = services.paper_cache
    papers = cache.snapshot
    return templates.TemplateResponse(
        request,
        "papers.html",
        {
            "signed_in": bool(get_access_token(request)),
            "load_state": cache.state.value,
            "papers": flt.apply(papers),
            "filter": flt,
            "counts": selectors.status_counts(papers, READ),
            "tags": selectors.tag_set(papers),
            "histogram": selectors.tag_histogram(papers),
            "timeline": selectors.activity_timeline(papers),
            "recent": selectors.recent_activity(papers),
            "editing": editing,
            "error": error or cache.error,
        },
        status_code=status_code,
    )


@router.get("/papers", response_class=HTMLResponse)
def papers_page(request: Request, status: str | None = None, tag: str | None = None, q: str | None = None, edit: int | None = None):
    services = get_services(request)
    if is_view_activation(request):
        services.paper_cache.activate()
    else:
        services.paper_cache.ensure_loaded()
    flt = PaperFilter.from_params(status, tag, q)
    editing = services.papers.begin_edit(edit) if edit is not None else None
    if edit is not None and editing is None:
        return _render(request, flt, error=f"Paper {edit} not found.", status_code=404)
    return _render(request, flt, editing=editing)


@router.post("/papers")
def add_paper(
    request: Request,
    title: str = Form(""),
    link: str = Form(""),
    note: str = Form(""),
    tags: str = Form(""),
):
    services = get_services(request)
    try:
        services.papers.add(make_paper_draft(title, link, note, tags), access_token=get_access_token(request))
    except (ValidationError, StoreError) as e:
        return _render(request, PaperFilter(), error=str(e), status_code=error_status(e))
    return RedirectResponse(url=_list_url(), status_code=303)


@router.post("/papers/{paper_id}/toggle")
def toggle_paper(request: Request, paper_id: int, status: str = Form("all"), tag: str = Form(""), q: str = Form("")):
    services = get_services(request)
    try:
        services.papers.toggle_status(paper_id, access_token=get_access_token(request))
    except (NotFoundError, StoreError) as e:
        return _render(request, PaperFilter.from_params(status, tag, q), error=str(e), status_code=error_status(e))
    return RedirectResponse(url=_list_url(status, tag, q), status_code=303)


@router.post("/papers/{paper_id}/edit")
def save_paper(
    request: Request,
    paper_id: int,
    title: str = Form(""),
    link: str = Form(""),
    note: str = Form(""),
    tags: str = Form(""),
    status: str = Form("all"),
    tag: str = Form(""),
    q: str = Form(""),
):
    services = get_services(request)
    try:
        services.papers.save_edit(paper_id, make_paper_draft(title, link, note, tags), access_token=get_access_token(request))
    except KnowtrackError as e:
        editing = services.papers.begin_edit(paper_id)
        return _render(request, PaperFilter.from_params(status, tag, q), editing=editing, error=str(e), status_code=error_status(e))
    return RedirectResponse(url=_list_url(status, tag, q), status_code=303)


@router.get("/papers/{paper_id}/delete", response_class=HTMLResponse)
def confirm_delete_paper(request: Request, paper_id: int):
    services = get_services(request)
    services.paper_cache.ensure_loaded()
    paper = services.papers.begin_edit(paper_id)
    if paper is None:
        return _render(request, PaperFilter(), error=f"Paper {paper_id} not found.", status_code=404)
    return templates.TemplateResponse(
        request,
        "confirm_delete.html",
        {
            "signed_in": bool(get_access_token(request)),
            "kind": "paper",
            "label": paper.title,
            "action": f"/papers/{paper_id}/delete",
            "back": _list_url(),
        },
    )


@router.post("/papers/{paper_id}/delete")
def delete_paper(request: Request, paper_id: int, confirm: str = Form("")):
    services = get_services(request)
    try:
        services.papers.delete(paper_id, confirmed=confirm == "yes", access_token=get_access_token(request))
    except StoreError as e:
        return _render(request, PaperFilter(), error=str(e), status_code=error_status(e))
    return RedirectResponse(url=_list_url(), status_code=303)
