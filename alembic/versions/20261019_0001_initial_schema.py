"""Initial schema - users and the portfolio resource tree

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('external_id', sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_external_id', 'users', ['external_id'], unique=True)
    
    # Portfolios table (root of the owned tree)
    op.create_table(
        'portfolios',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('title_key', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('owner_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('owner_id', 'title_key', name='uq_portfolios_owner_title'),
    )
    op.create_index('ix_portfolios_owner_id', 'portfolios', ['owner_id'])
    
    # Categories table
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('title_key', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('owner_id', sa.String(36), nullable=False),
        sa.Column('portfolio_id', sa.Integer(), sa.ForeignKey('portfolios.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('portfolio_id', 'title_key', name='uq_categories_portfolio_title'),
    )
    op.create_index('ix_categories_owner_id', 'categories', ['owner_id'])
    op.create_index('ix_categories_portfolio_id', 'categories', ['portfolio_id'])
    op.create_index('ix_categories_portfolio_position', 'categories', ['portfolio_id', 'position'])
    
    # Sections table
    op.create_table(
        'sections',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('title_key', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(50), nullable=False, server_default='text'),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('owner_id', sa.String(36), nullable=False),
        sa.Column('portfolio_id', sa.Integer(), sa.ForeignKey('portfolios.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('portfolio_id', 'title_key', name='uq_sections_portfolio_title'),
    )
    op.create_index('ix_sections_type', 'sections', ['type'])
    op.create_index('ix_sections_owner_id', 'sections', ['owner_id'])
    op.create_index('ix_sections_portfolio_id', 'sections', ['portfolio_id'])
    op.create_index('ix_sections_portfolio_position', 'sections', ['portfolio_id', 'position'])
    
    # Projects table
    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('main_image', sa.String(1024), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('client', sa.String(255), nullable=True),
        sa.Column('link', sa.String(1024), nullable=True),
        sa.Column('owner_id', sa.String(36), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_projects_owner_id', 'projects', ['owner_id'])
    op.create_index('ix_projects_category_id', 'projects', ['category_id'])
    
    # Section contents table
    op.create_table(
        'section_contents',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('image_id', sa.Integer(), nullable=True),
        sa.Column('owner_id', sa.String(36), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_section_contents_section_id', 'section_contents', ['section_id'])
    op.create_index('ix_section_contents_image_id', 'section_contents', ['image_id'])
    op.create_index('ix_section_contents_owner_id', 'section_contents', ['owner_id'])
    op.create_index('ix_section_contents_section_order', 'section_contents', ['section_id', 'order'])
    
    # Event logs table (append-only audit trail)
    op.create_table(
        'event_logs',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('event_type', sa.String(100), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(64), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=True),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_event_logs_event_type', 'event_logs', ['event_type'])
    op.create_index('ix_event_logs_entity_id', 'event_logs', ['entity_id'])
    op.create_index('ix_event_logs_user_id', 'event_logs', ['user_id'])
    op.create_index('ix_event_logs_created_at', 'event_logs', ['created_at'])
    op.create_index('ix_event_logs_entity', 'event_logs', ['entity_type', 'entity_id'])
    op.create_index('ix_event_logs_user_time', 'event_logs', ['user_id', 'created_at'])
    op.create_index('ix_event_logs_type_time', 'event_logs', ['event_type', 'created_at'])


def downgrade() -> None:
    op.drop_table('event_logs')
    op.drop_table('section_contents')
    op.drop_table('projects')
    op.drop_table('sections')
    op.drop_table('categories')
    op.drop_table('portfolios')
    op.drop_table('users')
