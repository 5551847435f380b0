"""Initial schema - users, tickets, comments, status logs

Revision ID: 001
Revises:
Create Date: 2026-10-19

WHY: Creates the four ticket-desk tables. Foreign keys encode the delete
rules: comments and status logs cascade with their ticket, while users
referenced as creator, comment author or status changer cannot be deleted.
Deleting an assignee clears the assignment.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


USER_ROLES = ('MANAGER', 'SUPPORT', 'USER')
TICKET_STATUSES = ('OPEN', 'IN_PROGRESS', 'RESOLVED', 'CLOSED')
TICKET_PRIORITIES = ('LOW', 'MEDIUM', 'HIGH')


def upgrade() -> None:
    """
    Create enum types, tables and indexes.
    """
    user_role = sa.Enum(*USER_ROLES, name='userrole')
    ticket_status = sa.Enum(*TICKET_STATUSES, name='ticketstatus')
    ticket_priority = sa.Enum(*TICKET_PRIORITIES, name='ticketpriority')

    bind = op.get_bind()
    user_role.create(bind, checkfirst=True)
    ticket_status.create(bind, checkfirst=True)
    ticket_priority.create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column(
            'role',
            sa.Enum(*USER_ROLES, name='userrole', create_type=False),
            nullable=False,
            server_default='USER',
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'tickets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'created_by_user_id',
            sa.Integer(),
            sa.ForeignKey('users.id', ondelete='RESTRICT'),
            nullable=False,
        ),
        sa.Column(
            'assigned_to_user_id',
            sa.Integer(),
            sa.ForeignKey('users.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column(
            'status',
            sa.Enum(*TICKET_STATUSES, name='ticketstatus', create_type=False),
            nullable=False,
            server_default='OPEN',
        ),
        sa.Column(
            'priority',
            sa.Enum(*TICKET_PRIORITIES, name='ticketpriority', create_type=False),
            nullable=False,
            server_default='MEDIUM',
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
    )
    op.create_index('ix_tickets_status', 'tickets', ['status'])
    op.create_index('ix_tickets_created_by', 'tickets', ['created_by_user_id'])
    op.create_index('ix_tickets_assigned_to', 'tickets', ['assigned_to_user_id'])

    op.create_table(
        'ticket_comments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'ticket_id',
            sa.Integer(),
            sa.ForeignKey('tickets.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'user_id',
            sa.Integer(),
            sa.ForeignKey('users.id', ondelete='RESTRICT'),
            nullable=False,
        ),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_ticket_comments_ticket_id', 'ticket_comments', ['ticket_id'])
    op.create_index('ix_ticket_comments_created_at', 'ticket_comments', ['created_at'])

    op.create_table(
        'ticket_status_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'ticket_id',
            sa.Integer(),
            sa.ForeignKey('tickets.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'old_status',
            sa.Enum(*TICKET_STATUSES, name='ticketstatus', create_type=False),
            nullable=False,
        ),
        sa.Column(
            'new_status',
            sa.Enum(*TICKET_STATUSES, name='ticketstatus', create_type=False),
            nullable=False,
        ),
        sa.Column(
            'changed_by_user_id',
            sa.Integer(),
            sa.ForeignKey('users.id', ondelete='RESTRICT'),
            nullable=False,
        ),
        sa.Column(
            'changed_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text('CURRENT_TIMESTAMP'),
        ),
    )
    op.create_index('ix_ticket_status_logs_ticket_id', 'ticket_status_logs', ['ticket_id'])


def downgrade() -> None:
    """
    Drop everything created in upgrade(), children first.
    """
    op.drop_index('ix_ticket_status_logs_ticket_id', table_name='ticket_status_logs')
    op.drop_table('ticket_status_logs')

    op.drop_index('ix_ticket_comments_created_at', table_name='ticket_comments')
    op.drop_index('ix_ticket_comments_ticket_id', table_name='ticket_comments')
    op.drop_table('ticket_comments')

    op.drop_index('ix_tickets_assigned_to', table_name='tickets')
    op.drop_index('ix_tickets_created_by', table_name='tickets')
    op.drop_index('ix_tickets_status', table_name='tickets')
    op.drop_table('tickets')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    sa.Enum(name='ticketpriority').drop(bind, checkfirst=True)
    sa.Enum(name='ticketstatus').drop(bind, checkfirst=True)
    sa.Enum(name='userrole').drop(bind, checkfirst=True)
