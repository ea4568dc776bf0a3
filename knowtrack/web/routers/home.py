from __future__ import annotations
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from knowtrack.web.dependencies import get_access_token
from knowtrack.web.templating import templates

router = APIRouter()

@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    return templates.TemplateResponse(request, "home.html", {"signed_in": bool(get_access_token(request))})
