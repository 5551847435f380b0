"""
Unit tests for comment rules.
"""

from dataclasses import dataclass
from typing import Optional

import pytest

from ticketdesk.core.exceptions import AuthorizationError, ValidationError
from ticketdesk.core.identity import Identity
from ticketdesk.models.user import UserRole
from ticketdesk.services import comment_policy


MANAGER = Identity(user_id=1, role=UserRole.MANAGER)
SUPPORT = Identity(user_id=2, role=UserRole.SUPPORT)
USER = Identity(user_id=4, role=UserRole.USER)
OTHER_USER = Identity(user_id=5, role=UserRole.USER)


@dataclass
class FakeTicket:
    created_by_user_id: int
    assigned_to_user_id: Optional[int] = None


@dataclass
class FakeComment:
    user_id: int


class TestAddAndList:
    @pytest.mark.parametrize(
        "identity, allowed",
        [(MANAGER, True), (SUPPORT, True), (USER, True), (OTHER_USER, False)],
    )
    def test_follows_ticket_visibility(self, identity, allowed):
        ticket = FakeTicket(created_by_user_id=USER.user_id, assigned_to_user_id=SUPPORT.user_id)
        assert comment_policy.can_add_comment(identity, ticket) is allowed
        assert comment_policy.can_list_comments(identity, ticket) is allowed

    def test_support_cannot_comment_on_unassigned_ticket(self):
        ticket = FakeTicket(created_by_user_id=USER.user_id)
        with pytest.raises(AuthorizationError):
            comment_policy.ensure_can_add_comment(SUPPORT, ticket, ticket_id=1)


class TestEditAndDelete:
    def test_author_and_manager_only(self):
        comment = FakeComment(user_id=SUPPORT.user_id)

        assert comment_policy.can_edit_comment(SUPPORT, comment)
        assert comment_policy.can_edit_comment(MANAGER, comment)
        assert not comment_policy.can_edit_comment(USER, comment)
        assert comment_policy.can_delete_comment(MANAGER, comment)
        assert not comment_policy.can_delete_comment(USER, comment)

    def test_messages(self):
        comment = FakeComment(user_id=USER.user_id)
        with pytest.raises(AuthorizationError, match="edit this comment"):
            comment_policy.ensure_can_edit_comment(OTHER_USER, comment, comment_id=3)
        with pytest.raises(AuthorizationError, match="delete this comment"):
            comment_policy.ensure_can_delete_comment(OTHER_USER, comment, comment_id=3)


class TestCommentBody:
    def test_strips_surrounding_whitespace(self):
        assert comment_policy.clean_comment_body("  done  ") == "done"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_blank_rejected(self, text):
        with pytest.raises(ValidationError):
            comment_policy.clean_comment_body(text)
