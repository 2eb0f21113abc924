"""add_study_groups_and_calendar

Revision ID: 9a7e4c2b1d08
Revises: 5f0c1d2e3a4b
Create Date: 2026-10-18 15:40:21.558914

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9a7e4c2b1d08'
down_revision: Union[str, None] = '5f0c1d2e3a4b'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

group_role = sa.Enum('OWNER', 'ADMIN', 'MEMBER', name='grouprole')
event_type = sa.Enum(
    'STUDY_SESSION', 'GROUP_STUDY', 'EXAM', 'ASSIGNMENT', 'MEETING', 'REMINDER',
    name='eventtype',
)


def upgrade() -> None:
    conn = op.get_bind()
    columns = [col['name'] for col in sa.inspect(conn).get_columns('users')]
    with op.batch_alter_table('users', schema=None) as batch_op:
        if 'profile_complete' not in columns:
            batch_op.add_column(
                sa.Column('profile_complete', sa.Boolean(), nullable=False, server_default=sa.false())
            )

    op.create_table(
        'study_groups',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('subject_id', sa.Integer(), nullable=True),
        sa.Column('max_members', sa.Integer(), nullable=False),
        sa.Column('is_private', sa.Boolean(), nullable=False),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('timezone', sa.String(length=64), nullable=True),
        sa.Column('schedule', sa.JSON(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_study_groups_id'), 'study_groups', ['id'], unique=False)

    op.create_table(
        'study_group_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('group_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role', group_role, nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['group_id'], ['study_groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('group_id', 'user_id', name='uq_study_group_members_pair'),
    )
    op.create_index(
        op.f('ix_study_group_members_id'), 'study_group_members', ['id'], unique=False
    )

    op.create_table(
        'calendar_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('event_type', event_type, nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('is_all_day', sa.Boolean(), nullable=False),
        sa.Column('color', sa.String(length=16), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_calendar_events_id'), 'calendar_events', ['id'], unique=False)


def downgrade() -> None:
    for table in ('calendar_events', 'study_group_members', 'study_groups'):
        op.drop_index(op.f(f'ix_{table}_id'), table_name=table)
        op.drop_table(table)

    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_column('profile_complete')

    bind = op.get_bind()
    for enum in (event_type, group_role):
        enum.drop(bind, checkfirst=True)
