"""Baseline: users, form configurations, naming requests, drafts, approved names, Gemini config.

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_baseline'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # ==========================================================================
    # users
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('google_id', sa.String(255), nullable=True),
        sa.Column('picture', sa.String(1000), nullable=True),
        sa.Column('department', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('token_version', sa.Integer(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.UniqueConstraint('google_id', name='uq_users_google_id'),
    )

    # ==========================================================================
    # form_configurations
    # ==========================================================================
    op.create_table(
        'form_configurations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('fields_json', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_by_user_id', sa.Uuid(), nullable=True),
        sa.Column('updated_by_user_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['updated_by_user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_form_configurations_name'),
    )
    op.create_index('idx_form_configurations_active', 'form_configurations', ['is_active'])

    # ==========================================================================
    # naming_requests + status history
    # ==========================================================================
    op.create_table(
        'naming_requests',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('form_data', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('status_before_hold', sa.String(20), nullable=True),
        sa.Column('requestor_id', sa.Uuid(), nullable=False),
        sa.Column('assigned_reviewer_id', sa.Uuid(), nullable=True),
        sa.Column('form_config_id', sa.Uuid(), nullable=True),
        sa.Column('final_approved_name', sa.String(255), nullable=True),
        sa.Column('review_comments', sa.Text(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['requestor_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['assigned_reviewer_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(
            ['form_config_id'], ['form_configurations.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_naming_requests_requestor', 'naming_requests', ['requestor_id'])
    op.create_index('idx_naming_requests_status', 'naming_requests', ['status'])
    op.create_index('idx_naming_requests_reviewer', 'naming_requests', ['assigned_reviewer_id'])

    op.create_table(
        'naming_request_status_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('naming_request_id', sa.Uuid(), nullable=False),
        sa.Column('from_status', sa.String(20), nullable=True),
        sa.Column('to_status', sa.String(20), nullable=False),
        sa.Column('changed_by_user_id', sa.Uuid(), nullable=True),
        sa.Column('changed_by_name', sa.String(255), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['naming_request_id'], ['naming_requests.id'], ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(['changed_by_user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'idx_naming_request_history_request',
        'naming_request_status_history',
        ['naming_request_id', 'changed_at'],
    )

    # ==========================================================================
    # naming_request_drafts
    # ==========================================================================
    op.create_table(
        'naming_request_drafts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('form_config_id', sa.Uuid(), nullable=True),
        sa.Column('form_data', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['form_config_id'], ['form_configurations.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', name='uq_naming_request_drafts_user'),
    )

    # ==========================================================================
    # approved_names
    # ==========================================================================
    op.create_table(
        'approved_names',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('service_line', sa.String(255), nullable=True),
        sa.Column('trademark', sa.String(255), nullable=True),
        sa.Column('contact_person', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('approval_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('naming_request_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['naming_request_id'], ['naming_requests.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_approved_names_name', 'approved_names', ['name'])

    # ==========================================================================
    # gemini_config + prompt items
    # ==========================================================================
    op.create_table(
        'gemini_config',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('api_key_encrypted', sa.Text(), nullable=True),
        sa.Column('default_prompt', sa.Text(), nullable=False),
        sa.Column('base_prompt_text', sa.Text(), nullable=False),
        sa.Column('base_prompt_active', sa.Boolean(), nullable=False),
        sa.Column('model', sa.String(100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'gemini_prompt_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('config_id', sa.Uuid(), nullable=False),
        sa.Column('kind', sa.String(20), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['config_id'], ['gemini_config.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'idx_gemini_prompt_items_config_kind', 'gemini_prompt_items', ['config_id', 'kind']
    )


def downgrade() -> None:
    op.drop_index('idx_gemini_prompt_items_config_kind', table_name='gemini_prompt_items')
    op.drop_table('gemini_prompt_items')
    op.drop_table('gemini_config')
    op.drop_index('idx_approved_names_name', table_name='approved_names')
    op.drop_table('approved_names')
    op.drop_table('naming_request_drafts')
    op.drop_index('idx_naming_request_history_request', table_name='naming_request_status_history')
    op.drop_table('naming_request_status_history')
    op.drop_index('idx_naming_requests_reviewer', table_name='naming_requests')
    op.drop_index('idx_naming_requests_status', table_name='naming_requests')
    op.drop_index('idx_naming_requests_requestor', table_name='naming_requests')
    op.drop_table('naming_requests')
    op.drop_index('idx_form_configurations_active', table_name='form_configurations')
    op.drop_table('form_configurations')
    op.drop_table('users')
