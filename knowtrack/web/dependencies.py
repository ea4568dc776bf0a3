from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from fastapi import Request

from knowtrack.config import Settings
from knowtrack.errors import KnowtrackError, NotFoundError, StoreError, ValidationError
from knowtrack.models.paper import Paper
from knowtrack.models.word import Word
from knowtrack.service.auth_service import AuthService
from knowtrack.service.collection import CollectionCache
from knowtrack.service.paper_service import PaperService
from knowtrack.service.word_service import WordService

@dataclass
class AppServices:
    settings: Settings
    papers: PaperService
    words: WordService
    paper_cache: CollectionCache[Paper]
    word_cache: CollectionCache[Word]
    auth: AuthService

def get_services(request: Request) -> AppServices:
    return request.app.state.services

def get_access_token(request: Request) -> Optional[str]:
    settings = get_services(request).settings
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None

def is_view_activation(request: Request) -> bool:
    """A plain load of a view (no filter or edit parameters) reloads its data."""
    return not request.query_params

def error_status(e: KnowtrackError) -> int:
    if isinstance(e, ValidationError):
        return 400
    if isinstance(e, NotFoundError):
        return 404
    if isinstance(e, StoreError):
        return 502
    return 500
