"""initial_schema

Revision ID: 4c1e7a9d2b30
Revises:
Create Date: 2026-10-12 09:14:27.518204

Creates users, user_sessions, workspaces, projects, usage_logs and
generated_content. Tables that already exist are left untouched.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '4c1e7a9d2b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('first_name', sa.String(), nullable=False),
            sa.Column('last_name', sa.String(), nullable=False),
            sa.Column('avatar_url', sa.String(), nullable=True),
            sa.Column('subscription_plan', sa.String(), nullable=False, server_default='free'),
            sa.Column('subscription_status', sa.String(), nullable=False, server_default='active'),
            sa.Column('subscription_expires_at', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    if not table_exists('user_sessions'):
        op.create_table('user_sessions',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('token_hash', sa.String(length=64), nullable=False),
            sa.Column('expires_at', sa.DateTime(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('token_hash')
        )
        op.create_index(op.f('ix_user_sessions_user_id'), 'user_sessions', ['user_id'], unique=False)
        op.create_index('idx_session_user_expires', 'user_sessions', ['user_id', 'expires_at'], unique=False)

    if not table_exists('workspaces'):
        op.create_table('workspaces',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('owner_id', sa.String(length=36), nullable=False),
            sa.Column('plan_type', sa.String(), nullable=False, server_default='personal'),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_workspaces_owner_id'), 'workspaces', ['owner_id'], unique=False)
        op.create_index(op.f('ix_workspaces_created_at'), 'workspaces', ['created_at'], unique=False)

    if not table_exists('projects'):
        op.create_table('projects',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('workspace_id', sa.String(length=36), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('content_type', sa.String(), nullable=False),
            sa.Column('content', sa.Text(), nullable=False),
            sa.Column('word_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('status', sa.String(), nullable=False, server_default='draft'),
            sa.Column('metadata', sa.JSON(), nullable=False),
            sa.Column('created_by', sa.String(length=36), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ),
            sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_projects_workspace_id'), 'projects', ['workspace_id'], unique=False)
        op.create_index(op.f('ix_projects_content_type'), 'projects', ['content_type'], unique=False)
        op.create_index(op.f('ix_projects_created_by'), 'projects', ['created_by'], unique=False)
        op.create_index(op.f('ix_projects_updated_at'), 'projects', ['updated_at'], unique=False)
        op.create_index('idx_workspace_updated', 'projects', ['workspace_id', 'updated_at'], unique=False)

    if not table_exists('usage_logs'):
        op.create_table('usage_logs',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('resource_type', sa.String(), nullable=False),
            sa.Column('amount', sa.Integer(), nullable=False),
            sa.Column('project_id', sa.String(length=36), nullable=True),
            sa.Column('month_key', sa.String(length=7), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_usage_logs_user_id'), 'usage_logs', ['user_id'], unique=False)
        op.create_index(op.f('ix_usage_logs_resource_type'), 'usage_logs', ['resource_type'], unique=False)
        op.create_index(op.f('ix_usage_logs_month_key'), 'usage_logs', ['month_key'], unique=False)
        op.create_index(op.f('ix_usage_logs_created_at'), 'usage_logs', ['created_at'], unique=False)
        op.create_index('idx_user_resource_month', 'usage_logs', ['user_id', 'resource_type', 'month_key'], unique=False)

    if not table_exists('generated_content'):
        op.create_table('generated_content',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('user_id', sa.String(length=36), nullable=False),
            sa.Column('project_id', sa.String(length=36), nullable=True),
            sa.Column('kind', sa.String(), nullable=False),
            sa.Column('content_type', sa.String(), nullable=True),
            sa.Column('prompt', sa.Text(), nullable=False),
            sa.Column('content', sa.Text(), nullable=True),
            sa.Column('image_url', sa.String(), nullable=True),
            sa.Column('style', sa.String(), nullable=True),
            sa.Column('word_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('tokens_used', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('model', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_generated_content_user_id'), 'generated_content', ['user_id'], unique=False)
        op.create_index(op.f('ix_generated_content_created_at'), 'generated_content', ['created_at'], unique=False)
        op.create_index('idx_generated_user_created', 'generated_content', ['user_id', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_table('generated_content')
    op.drop_table('usage_logs')
    op.drop_table('projects')
    op.drop_table('workspaces')
    op.drop_table('user_sessions')
    op.drop_table('users')
