"""
Session provider: who is signed in, and who needs to know when that changes.

Controllers subscribe to the provider instead of reading a global; every
identity change is pushed to subscribers synchronously.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
GUEST_ID = "guest"
DEMO_ID = "demo"


@dataclass(frozen=True)
class Identity:
    id: str
    email: str
    guest: bool = False


@dataclass(frozen=True)
class AuthResult:
    ok: bool
    error: Optional[str] = None
    message: Optional[str] = None


Listener = Callable[[Optional[Identity]], None]


def _error_text(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or "Authentication failed"


class SessionProvider:
    def __init__(self, auth=None):
        # ``auth`` is a supabase ``client.auth``; None means guest-only
        self.auth = auth
        self.session = None
        self._identity: Optional[Identity] = None
        self._listeners: List[Listener] = []

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def available(self) -> bool:
        return self.auth is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_identity(self, identity: Optional[Identity]) -> None:
        if identity == self._identity:
            return
        self._identity = identity
        logger.info("Identity changed: %s", identity.email if identity else "signed out")
        for listener in list(self._listeners):
            listener(identity)

    # -------------------------------
    # Operations
    # -------------------------------

    def sign_in(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            return AuthResult(False, "Please fill in all fields")
        if not self.available:
            return AuthResult(False, "Sign-in is unavailable: Supabase is not configured")
        try:
            response = self.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.error("Sign in failed for %s: %s", email, e)
            return AuthResult(False, _error_text(e))
        self.session = response.session
        self._set_identity(Identity(id=response.user.id, email=response.user.email))
        return AuthResult(True, message="Signed in successfully!")

    def sign_up(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            return AuthResult(False, "Please fill in all fields")
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthResult(False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if not self.available:
            return AuthResult(False, "Sign-up is unavailable: Supabase is not configured")
        try:
            response = self.auth.sign_up({"email": email, "password": password})
        except Exception as e:
            logger.error("Sign up failed for %s: %s", email, e)
            return AuthResult(False, _error_text(e))
        if response.session is None or response.user is None:
            # Email confirmation pending
            return AuthResult(True, message="Account created successfully! You can now sign in.")
        self.session = response.session
        self._set_identity(Identity(id=response.user.id, email=response.user.email))
        return AuthResult(True, message="Account created successfully!")

    def sign_out(self) -> AuthResult:
        identity = self._identity
        if identity is not None and not identity.guest and self.available:
            try:
                self.auth.sign_out()
            except Exception as e:
                logger.error("Sign out failed: %s", e)
                return AuthResult(False, _error_text(e))
        self.session = None
        self._set_identity(None)
        return AuthResult(True, message="Signed out")

    def continue_as_guest(self, demo: bool = False) -> AuthResult:
        if demo:
            self._set_identity(Identity(id=DEMO_ID, email="demo@example.com", guest=True))
        else:
            self._set_identity(Identity(id=GUEST_ID, email="guest@example.com", guest=True))
        return AuthResult(True)

