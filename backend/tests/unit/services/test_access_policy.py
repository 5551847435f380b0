"""
Unit tests for the access policy.

WHAT: Exhaustive role x relationship checks for every predicate.

WHY: The policy is the single source of truth for who may do what. These
tests pin down each row of the rules table, including the cases that are
easy to get wrong (unassigned tickets and SUPPORT, USER and status).

HOW: Plain objects stand in for tickets and comments; no database.
"""

from dataclasses import dataclass
from typing import Optional

import pytest

from ticketdesk.core.exceptions import AuthorizationError
from ticketdesk.core.identity import Identity
from ticketdesk.models.user import UserRole
from ticketdesk.services import access_policy
from ticketdesk.services.access_policy import TicketListScope


MANAGER = Identity(user_id=1, role=UserRole.MANAGER)
SUPPORT = Identity(user_id=2, role=UserRole.SUPPORT)
OTHER_SUPPORT = Identity(user_id=3, role=UserRole.SUPPORT)
USER = Identity(user_id=4, role=UserRole.USER)
OTHER_USER = Identity(user_id=5, role=UserRole.USER)


@dataclass
class FakeTicket:
    created_by_user_id: int
    assigned_to_user_id: Optional[int] = None


@dataclass
class FakeComment:
    user_id: int


USERS_TICKET_ASSIGNED_TO_SUPPORT = FakeTicket(
    created_by_user_id=USER.user_id, assigned_to_user_id=SUPPORT.user_id
)
UNASSIGNED_TICKET = FakeTicket(created_by_user_id=USER.user_id)


class TestCreateTicket:
    @pytest.mark.parametrize(
        "identity, allowed",
        [(MANAGER, True), (USER, True), (SUPPORT, False)],
    )
    def test_can_create_ticket(self, identity, allowed):
        assert access_policy.can_create_ticket(identity) is allowed

    def test_support_denial_names_role(self):
        with pytest.raises(AuthorizationError) as exc_info:
            access_policy.ensure_can_create_ticket(SUPPORT)
        assert exc_info.value.message == "SUPPORT role cannot create tickets."


class TestViewTicket:
    @pytest.mark.parametrize(
        "identity, allowed",
        [
            (MANAGER, True),
            (SUPPORT, True),
            (OTHER_SUPPORT, False),
            (USER, True),
            (OTHER_USER, False),
        ],
    )
    def test_assigned_ticket(self, identity, allowed):
        assert access_policy.can_view_ticket(identity, USERS_TICKET_ASSIGNED_TO_SUPPORT) is allowed

    def test_unassigned_ticket_invisible_to_every_support(self):
        assert access_policy.can_view_ticket(SUPPORT, UNASSIGNED_TICKET) is False
        assert access_policy.can_view_ticket(OTHER_SUPPORT, UNASSIGNED_TICKET) is False
        assert access_policy.can_view_ticket(MANAGER, UNASSIGNED_TICKET) is True

    def test_support_who_created_ticket_still_needs_assignment(self):
        ticket = FakeTicket(created_by_user_id=SUPPORT.user_id)
        assert access_policy.can_view_ticket(SUPPORT, ticket) is False

    def test_ensure_raises(self):
        with pytest.raises(AuthorizationError):
            access_policy.ensure_can_view_ticket(OTHER_USER, UNASSIGNED_TICKET, ticket_id=9)


class TestAssignTicket:
    @pytest.mark.parametrize(
        "identity, allowed",
        [(MANAGER, True), (SUPPORT, True), (USER, False)],
    )
    def test_can_assign(self, identity, allowed):
        assert access_policy.can_assign_ticket(identity) is allowed


class TestUpdateStatus:
    @pytest.mark.parametrize(
        "identity, allowed",
        [
            (MANAGER, True),
            (SUPPORT, True),
            (OTHER_SUPPORT, False),
            (USER, False),
            (OTHER_USER, False),
        ],
    )
    def test_can_update_status(self, identity, allowed):
        assert access_policy.can_update_status(identity, USERS_TICKET_ASSIGNED_TO_SUPPORT) is allowed

    def test_creator_cannot_move_own_ticket(self):
        with pytest.raises(AuthorizationError):
            access_policy.ensure_can_update_status(USER, USERS_TICKET_ASSIGNED_TO_SUPPORT, ticket_id=1)

    def test_support_message(self):
        with pytest.raises(AuthorizationError) as exc_info:
            access_policy.ensure_can_update_status(
                OTHER_SUPPORT, USERS_TICKET_ASSIGNED_TO_SUPPORT, ticket_id=1
            )
        assert exc_info.value.message == "You can only update tickets assigned to you."


class TestDeleteAndUsers:
    @pytest.mark.parametrize(
        "identity, allowed",
        [(MANAGER, True), (SUPPORT, False), (USER, False)],
    )
    def test_manager_only(self, identity, allowed):
        assert access_policy.can_delete_ticket(identity) is allowed
        assert access_policy.can_manage_users(identity) is allowed

    def test_delete_message(self):
        with pytest.raises(AuthorizationError) as exc_info:
            access_policy.ensure_can_delete_ticket(SUPPORT, ticket_id=1)
        assert exc_info.value.message == "Only MANAGER can delete tickets."

    def test_user_admin_messages(self):
        with pytest.raises(AuthorizationError, match="Only MANAGER can create users."):
            access_policy.ensure_can_create_user(USER)
        with pytest.raises(AuthorizationError, match="Only MANAGER can list users."):
            access_policy.ensure_can_list_users(SUPPORT)

    def test_denial_context_carries_caller(self):
        with pytest.raises(AuthorizationError) as exc_info:
            access_policy.ensure_can_delete_ticket(USER, ticket_id=42)
        assert exc_info.value.context == {"user_id": USER.user_id, "role": "USER", "ticket_id": 42}


class TestModifyComment:
    @pytest.mark.parametrize(
        "identity, allowed",
        [(MANAGER, True), (USER, True), (SUPPORT, False), (OTHER_USER, False)],
    )
    def test_author_or_manager(self, identity, allowed):
        comment = FakeComment(user_id=USER.user_id)
        assert access_policy.can_modify_comment(identity, comment) is allowed


class TestTicketListScope:
    def test_scopes(self):
        assert access_policy.ticket_list_scope(MANAGER) == TicketListScope()
        assert access_policy.ticket_list_scope(SUPPORT) == TicketListScope(
            assigned_to_user_id=SUPPORT.user_id
        )
        assert access_policy.ticket_list_scope(USER) == TicketListScope(
            created_by_user_id=USER.user_id
        )

    @pytest.mark.parametrize("identity", [MANAGER, SUPPORT, OTHER_SUPPORT, USER, OTHER_USER])
    def test_scope_matches_view_predicate(self, identity):
        """Filtering by the scope selects exactly the viewable tickets."""
        tickets = [
            FakeTicket(created_by_user_id=c, assigned_to_user_id=a)
            for c in (MANAGER.user_id, USER.user_id, OTHER_USER.user_id)
            for a in (None, MANAGER.user_id, SUPPORT.user_id, OTHER_SUPPORT.user_id)
        ]
        scope = access_policy.ticket_list_scope(identity)

        def in_scope(ticket):
            if scope.created_by_user_id not in (None, ticket.created_by_user_id):
                return False
            if scope.assigned_to_user_id not in (None, ticket.assigned_to_user_id):
                return False
            return True

        for ticket in tickets:
            assert in_scope(ticket) == access_policy.can_view_ticket(identity, ticket)
