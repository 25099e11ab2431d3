"""Initial schema: users, notes, collaborators, activity_logs

Revision ID: 8f1c2a7d4e10
Revises:
Create Date: 2025-10-02 18:04:11.520914

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from notesync.core.models.types import GUID


# revision identifiers, used by Alembic.
revision: str = '8f1c2a7d4e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('length(name) <= 100', name='ck_users_name_len'),
        sa.CheckConstraint("role IN ('user', 'admin')", name='ck_users_role'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('idx_users_email', 'users', ['email'])

    op.create_table(
        'notes',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('tags', sa.Text(), nullable=False),
        sa.Column('is_pinned', sa.Boolean(), nullable=False),
        sa.Column('share_token', sa.String(length=64), nullable=True),
        sa.Column('owner_id', GUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('length(title) <= 200', name='ck_notes_title_len'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('share_token'),
    )
    op.create_index('idx_notes_owner_id', 'notes', ['owner_id'])
    op.create_index('idx_notes_pinned_updated', 'notes', ['is_pinned', 'updated_at'])

    op.create_table(
        'collaborators',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('note_id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('permission', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("permission IN ('editor', 'viewer')", name='ck_collaborators_permission'),
        sa.ForeignKeyConstraint(['note_id'], ['notes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('note_id', 'user_id', name='uq_collaborators_note_user'),
    )
    op.create_index('idx_collaborators_note_id', 'collaborators', ['note_id'])
    op.create_index('idx_collaborators_user_id', 'collaborators', ['user_id'])

    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('note_id', GUID(), nullable=True),
        sa.Column('action', sa.String(length=40), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['note_id'], ['notes.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_activity_note_created', 'activity_logs', ['note_id', 'created_at'])
    op.create_index('idx_activity_user_id', 'activity_logs', ['user_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_activity_user_id', table_name='activity_logs')
    op.drop_index('idx_activity_note_created', table_name='activity_logs')
    op.drop_table('activity_logs')
    op.drop_index('idx_collaborators_user_id', table_name='collaborators')
    op.drop_index('idx_collaborators_note_id', table_name='collaborators')
    op.drop_table('collaborators')
    op.drop_index('idx_notes_pinned_updated', table_name='notes')
    op.drop_index('idx_notes_owner_id', table_name='notes')
    op.drop_table('notes')
    op.drop_index('idx_users_email', table_name='users')
    op.drop_table('users')
