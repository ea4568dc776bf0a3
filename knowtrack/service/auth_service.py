from __future__ import annotations
import logging
from dataclasses import dataclass

from knowtrack.db.store import StoreClient
from knowtrack.errors import KnowtrackError, StoreError

logger = logging.getLogger(__name__)

class AuthError(KnowtrackError): pass

@dataclass
class AuthResult:
    email: str
    session_token: str

class AuthService:
    """Sign-in against the store's auth endpoint; the access token is the session."""

    def __init__(self, store: StoreClient):
        self.store = store

    def login(self, email: str, password: str) -> AuthResult:
        email = email.strip()
        if not email or not password:
            raise AuthError("Email and password are required.")
        try:
            session = self.store.sign_in(email, password)
        except StoreError as e:
            raise AuthError(e.message) from e
        token = session.get("access_token")
        if not token:
            raise AuthError("Sign-in did not return a session.")
        user = session.get("user") or {}
        return AuthResult(email=user.get("email", email), session_token=token)

    def logout(self, token: str) -> None:
        try:
            self.store.sign_out(token)
        except StoreError as e:
            logger.info("sign-out failed, dropping cookie anyway: %s", e.message)
