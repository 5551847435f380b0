"""
Comment rules.

Adding and listing comments follow ticket visibility; editing and deleting
belong to the author and to MANAGERs. Bodies must contain something other
than whitespace.
"""

from ticketdesk.core.exceptions import ValidationError
from ticketdesk.core.identity import Identity
from ticketdesk.services.access_policy import (
    CommentRef,
    TicketRef,
    can_modify_comment,
    can_view_ticket,
    deny,
)


def can_add_comment(identity: Identity, ticket: TicketRef) -> bool:
    return can_view_ticket(identity, ticket)


def can_list_comments(identity: Identity, ticket: TicketRef) -> bool:
    return can_view_ticket(identity, ticket)


def can_edit_comment(identity: Identity, comment: CommentRef) -> bool:
    return can_modify_comment(identity, comment)


def can_delete_comment(identity: Identity, comment: CommentRef) -> bool:
    return can_modify_comment(identity, comment)


def ensure_can_add_comment(identity: Identity, ticket: TicketRef, ticket_id: int) -> None:
    if not can_add_comment(identity, ticket):
        raise deny(
            identity, "You do not have permission to comment on this ticket.", ticket_id=ticket_id
        )


def ensure_can_list_comments(identity: Identity, ticket: TicketRef, ticket_id: int) -> None:
    if not can_list_comments(identity, ticket):
        raise deny(
            identity,
            "You do not have permission to view comments on this ticket.",
            ticket_id=ticket_id,
        )


def ensure_can_edit_comment(identity: Identity, comment: CommentRef, comment_id: int) -> None:
    if not can_edit_comment(identity, comment):
        raise deny(
            identity, "You do not have permission to edit this comment.", comment_id=comment_id
        )


def ensure_can_delete_comment(identity: Identity, comment: CommentRef, comment_id: int) -> None:
    if not can_delete_comment(identity, comment):
        raise deny(
            identity, "You do not have permission to delete this comment.", comment_id=comment_id
        )


def clean_comment_body(text: object) -> str:
    """
    Validate a comment body.

    Returns:
        The body with surrounding whitespace removed

    Raises:
        ValidationError: If the body is missing or blank
    """
    if not isinstance(text, str) or not text.strip():
        raise ValidationError(message="Comment is required.", field="comment")
    return text.strip()
