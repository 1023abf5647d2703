from datetime import date
from types import SimpleNamespace

import pytest

from fittrack.session import SessionProvider
from fittrack.store import LocalStore

TODAY = date(2024, 1, 10)


class FakeAuth:
    """Stands in for supabase ``client.auth``."""

    def __init__(self, fail_with=None, confirm_email=False):
        self.fail_with = fail_with
        self.confirm_email = confirm_email
        self.calls = []

    def _response(self, email, with_session=True):
        user = SimpleNamespace(id=f"user-{email}", email=email)
        session = SimpleNamespace(access_token="access", refresh_token="refresh") if with_session else None
        return SimpleNamespace(user=user, session=session)

    def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in", credentials["email"]))
        if self.fail_with:
            raise self.fail_with
        return self._response(credentials["email"])

    def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials["email"]))
        if self.fail_with:
            raise self.fail_with
        return self._response(credentials["email"], with_session=not self.confirm_email)

    def sign_out(self):
        self.calls.append(("sign_out", None))


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def store():
    return LocalStore()


@pytest.fixture
def auth():
    return FakeAuth()


@pytest.fixture
def session(auth):
    provider = SessionProvider(auth)
    provider.sign_in("ana@example.com", "secret123")
    return provider
