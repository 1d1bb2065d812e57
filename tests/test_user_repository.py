"""UserRepository against an in-memory SQLite database."""

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from features.users.domain.entities.user import User
from features.users.domain.errors import NoRowsAffectedError
from infrastructure.repositories.factory import RepositoryFactoryError, get_repository
from infrastructure.repositories.user_repository import UserRepository


@pytest.fixture
def repo(test_db):
    return UserRepository(test_db)


@pytest.fixture
async def jdoe(repo, test_db):
    user = await repo.add(User(username="jdoe", email="jdoe@example.com", full_name="John Doe"))
    await test_db.commit()
    return user


async def test_add_assigns_identity_and_timestamps(jdoe):
    assert jdoe.id >= 1
    assert jdoe.public_id is not None
    assert jdoe.created_at is not None
    assert jdoe.updated_at is not None


async def test_lookups_by_each_key(repo, jdoe):
    assert (await repo.get_by_id(jdoe.id)).username == "jdoe"
    assert (await repo.get_by_username("jdoe")).id == jdoe.id
    assert (await repo.get_by_public_id(str(jdoe.public_id))).id == jdoe.id


async def test_lookups_return_none_when_absent(repo, jdoe):
    assert await repo.get_by_id(999) is None
    assert await repo.get_by_username("nobody") is None
    assert await repo.get_by_public_id(str(uuid4())) is None


async def test_get_all_orders_by_id(repo, test_db):
    await repo.add(User(username="first", email="f@example.com", full_name="First"))
    await repo.add(User(username="second", email="s@example.com", full_name="Second"))
    await test_db.commit()
    assert [u.username for u in await repo.get_all()] == ["first", "second"]


async def test_duplicate_username_raises_integrity_error(repo, jdoe, test_db):
    with pytest.raises(IntegrityError):
        await repo.add(User(username="jdoe", email="other@example.com", full_name="Other"))
    await test_db.rollback()


async def test_update_changes_only_patched_fields(repo, jdoe, test_db):
    updated = await repo.update(str(jdoe.public_id), {"full_name": "Johnny"})
    await test_db.commit()

    assert updated.full_name == "Johnny"
    assert updated.email == "jdoe@example.com"
    assert updated.username == "jdoe"
    assert updated.public_id == jdoe.public_id
    assert updated.id == jdoe.id


async def test_update_ignores_storage_assigned_fields(repo, jdoe, test_db):
    updated = await repo.update(str(jdoe.public_id), {"id": 99, "email": "new@example.com"})
    await test_db.commit()
    assert updated.id == jdoe.id
    assert updated.email == "new@example.com"


async def test_update_missing_returns_none(repo):
    assert await repo.update(str(uuid4()), {"full_name": "Ghost"}) is None


async def test_delete_then_missing_raises_no_rows(repo, jdoe, test_db):
    await repo.delete(str(jdoe.public_id))
    await test_db.commit()
    assert await repo.get_by_id(jdoe.id) is None

    with pytest.raises(NoRowsAffectedError):
        await repo.delete(str(jdoe.public_id))


def test_factory_resolves_user_repository(test_db):
    assert isinstance(get_repository(User, test_db), UserRepository)


def test_factory_rejects_unknown_entity(test_db):
    class Unregistered(User):
        pass

    with pytest.raises(RepositoryFactoryError):
        get_repository(Unregistered, test_db)
