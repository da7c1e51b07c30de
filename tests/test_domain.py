"""DomainRepository: every operation borrows and returns its own connection."""

import pytest

from db.errors import IntegrityError
from models.user import User
from repositories.domain import DomainRepository

TOKEN = "h.p.sig"


@pytest.fixture
def repo(fake_db, hasher):
    return DomainRepository(fake_db, hasher, page_size=10)


def test_session_lifecycle(repo, fake_db):
    repo.create_session(4, TOKEN)
    fake_db.script([(4,)])
    assert repo.has_active_session(TOKEN) is True
    repo.end_session(TOKEN)
    fake_db.script([])
    assert repo.has_active_session(TOKEN) is False

    assert fake_db.acquired == fake_db.released == 4


def test_end_session_for_unknown_token_does_not_raise(repo, fake_db):
    fake_db.script(0)
    repo.end_session("never.created.token")


def test_connection_released_on_error(repo, fake_db):
    fake_db.script(RuntimeError("boom"))
    with pytest.raises(IntegrityError):
        repo.delete_franchise(1)
    assert fake_db.acquired == fake_db.released == 1


def test_page_size_reaches_order_listing(repo, fake_db):
    fake_db.script([])
    repo.list_orders(User(id=4, name="d", email="d@x.com"), 2)
    assert fake_db.conn.executed[0][1] == (4, 10, 10)
