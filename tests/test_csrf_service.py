import pytest

from app.enums import UserRole
from app.errors import CsrfError
from app.database import InMemoryStore
from app.services import CsrfService, SecurityService


@pytest.fixture
def store():
    return InMemoryStore()

@pytest.fixture
def csrf(test_settings, store):
    return CsrfService(test_settings, store)

@pytest.fixture
def session(test_settings, store):
    _, session = SecurityService(test_settings, store).create_session(UserRole.ADMIN)
    return session


def test_issued_token_verifies(csrf, session):
    token = csrf.issue(session)
    csrf.verify(session, cookie_token=token, header_token=token)

@pytest.mark.parametrize("cookie,header", [(None, "t"), ("t", None), ("", "")])
def test_missing_tokens_are_rejected(csrf, session, cookie, header):
    csrf.issue(session)
    with pytest.raises(CsrfError):
        csrf.verify(session, cookie_token=cookie, header_token=header)

def test_header_must_match_cookie(csrf, session):
    token = csrf.issue(session)
    with pytest.raises(CsrfError):
        csrf.verify(session, cookie_token=token, header_token=token + "x")

def test_forged_double_submit_is_rejected(csrf, session):
    # Cookie y cabecera iguales pero no emitidas por el servidor
    csrf.issue(session)
    with pytest.raises(CsrfError):
        csrf.verify(session, cookie_token="forjado", header_token="forjado")

def test_token_is_bound_to_session(csrf, session, test_settings, store):
    _, other = SecurityService(test_settings, store).create_session(UserRole.ADMIN)
    token = csrf.issue(session)
    with pytest.raises(CsrfError):
        csrf.verify(other, cookie_token=token, header_token=token)

def test_rotation_invalidates_previous_token(csrf, session):
    old = csrf.issue(session)
    new = csrf.rotate(session)
    assert new != old
    csrf.verify(session, cookie_token=new, header_token=new)
    with pytest.raises(CsrfError):
        csrf.verify(session, cookie_token=old, header_token=old)
