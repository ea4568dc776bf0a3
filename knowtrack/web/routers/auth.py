from __future__ import annotations
from fastapi import APIRouter, Request, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from knowtrack.service.auth_service import AuthError
from knowtrack.web.dependencies import get_access_token, get_services
from knowtrack.web.templating import templates

router = APIRouter()

@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request):
    return templates.TemplateResponse(request, "login.html", {"signed_in": False, "error": None})

@router.post("/login")
def login(request: Request, email: str = Form(...), password: str = Form(...)):
    """Exchange email and password for a store access token.

    The token itself is the session: it goes into the cookie and is sent as
    the bearer token on every write. There is no local session table.
    """
    services = get_services(request)
    try:
        result = services.auth.login(email, password)
    except AuthError as e:
        return templates.TemplateResponse(request, "login.html", {"signed_in": False, "error": str(e)}, status_code=400)
    resp = RedirectResponse(url="/", status_code=303)
    resp.set_cookie(services.settings.SESSION_COOKIE_NAME, result.session_token, httponly=True, samesite="lax")
    return resp

@router.post("/logout")
def logout(request: Request):
    services = get_services(request)
    token = get_access_token(request)
    if token:
        services.auth.logout(token)
    resp = RedirectResponse(url="/", status_code=303)
    resp.delete_cookie(services.settings.SESSION_COOKIE_NAME)
    return resp
