"""
Tests for UserDAO.

WHAT: Email normalization and uniqueness, filtered listing, and the
delete rules for users that tickets still point at.
"""

import pytest

from ticketdesk.core.exceptions import DuplicateEmailError, ResourceInUseError
from ticketdesk.dao.ticket import TicketDAO
from ticketdesk.dao.user import UserDAO, normalize_email
from ticketdesk.models.user import User, UserRole
from tests.factories import TicketCommentFactory, TicketFactory, UserFactory


def test_normalize_email():
    assert normalize_email("  Mixed.Case@Example.COM ") == "mixed.case@example.com"


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_stores_lower_cased_email(self, db_session):
        created = await UserDAO(User, db_session).create_user(
            email="New.Agent@Example.com",
            hashed_password="hashed",
            name="New Agent",
            role=UserRole.SUPPORT,
        )

        assert created.email == "new.agent@example.com"
        assert created.created_at is not None

    @pytest.mark.asyncio
    async def test_case_variant_is_duplicate(self, db_session, user):
        with pytest.raises(DuplicateEmailError):
            await UserDAO(User, db_session).create_user(
                email=user.email.upper(), hashed_password="hashed", name="Copy"
            )

    @pytest.mark.asyncio
    async def test_lookup_ignores_case(self, db_session, user):
        dao = UserDAO(User, db_session)

        assert (await dao.get_by_email("USER@EXAMPLE.COM")).id == user.id
        assert await dao.email_exists("User@Example.com") is True
        assert await dao.email_exists("nobody@example.com") is False


class TestListUsers:
    @pytest.mark.asyncio
    async def test_offset_limit_and_total(self, db_session, manager, support, user, other_user):
        users, total = await UserDAO(User, db_session).list_users(offset=1, limit=2)

        assert total == 4
        assert [u.id for u in users] == [support.id, user.id]

    @pytest.mark.asyncio
    async def test_role_filter(self, db_session, manager, support, other_support, user):
        users, total = await UserDAO(User, db_session).list_users(role=UserRole.SUPPORT)

        assert total == 2
        assert [u.id for u in users] == [support.id, other_support.id]

    @pytest.mark.asyncio
    async def test_offset_past_total(self, db_session, manager, user):
        users, total = await UserDAO(User, db_session).list_users(offset=10**19, limit=10)

        assert users == []
        assert total == 2

    @pytest.mark.asyncio
    async def test_search_is_literal(self, db_session, manager, support, user):
        dao = UserDAO(User, db_session)
        literal = await UserFactory.create(
            db_session, email="a_b@example.com", name="Back%Office"
        )

        for term in ("%", "_", "K%O"):
            users, total = await dao.list_users(search=term)
            assert [u.id for u in users] == [literal.id]
            assert total == 1

        users, total = await dao.list_users(search="s_m")
        assert (users, total) == ([], 0)

        users, total = await dao.list_users(search="  SAM ")
        assert [u.id for u in users] == [support.id]


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_unreferenced_user(self, db_session, other_user):
        dao = UserDAO(User, db_session)

        assert await dao.delete_user(other_user.id) is True
        assert await dao.get_by_id(other_user.id) is None

    @pytest.mark.asyncio
    async def test_missing_user(self, db_session):
        assert await UserDAO(User, db_session).delete_user(999) is False

    @pytest.mark.asyncio
    async def test_ticket_creator_cannot_be_deleted(self, db_session, user):
        await TicketFactory.create(db_session, created_by=user)

        with pytest.raises(ResourceInUseError):
            await UserDAO(User, db_session).delete_user(user.id)

    @pytest.mark.asyncio
    async def test_comment_author_cannot_be_deleted(self, db_session, support, user):
        ticket = await TicketFactory.create(db_session, created_by=user, assigned_to=support)
        await TicketCommentFactory.create(db_session, ticket=ticket, author=support)

        with pytest.raises(ResourceInUseError):
            await UserDAO(User, db_session).delete_user(support.id)

    @pytest.mark.asyncio
    async def test_assignee_is_unassigned(self, db_session, support, user):
        ticket = await TicketFactory.create(db_session, created_by=user, assigned_to=support)

        assert await UserDAO(User, db_session).delete_user(support.id) is True

        reloaded = await TicketDAO(db_session).get_by_id(ticket.id)
        assert reloaded.assigned_to_user_id is None


class TestUpdate:
    @pytest.mark.asyncio
    async def test_updates_fields(self, db_session, user):
        updated = await UserDAO(User, db_session).update(user.id, name="Renamed", role=UserRole.SUPPORT)

        assert updated.name == "Renamed"
        assert updated.role == UserRole.SUPPORT

    @pytest.mark.asyncio
    async def test_unknown_field(self, db_session, user):
        with pytest.raises(AttributeError):
            await UserDAO(User, db_session).update(user.id, nickname="x")

    @pytest.mark.asyncio
    async def test_missing_user(self, db_session):
        assert await UserDAO(User, db_session).update(999, name="Nobody") is None
