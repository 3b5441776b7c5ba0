"""Create dictionary, activity and RAG log tables

Revision ID: create_vardict_tables
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'create_vardict_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'variable_mappings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('korean', sa.String(length=100), nullable=False),
        sa.Column('english', sa.String(length=100), nullable=False),
        sa.Column('type', sa.String(length=30), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('usage', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('source', sa.String(length=20), nullable=False),
        sa.Column('confidence', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('korean', 'english', name='uq_variable_mappings_korean_english'),
    )
    op.create_index('ix_variable_mappings_id', 'variable_mappings', ['id'])
    op.create_index('ix_variable_mappings_korean', 'variable_mappings', ['korean'])
    op.create_index('ix_variable_mappings_english', 'variable_mappings', ['english'])
    op.create_index('ix_variable_mappings_category', 'variable_mappings', ['category'])

    op.create_table(
        'search_history',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('query', sa.String(length=255), nullable=False),
        sa.Column('result_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_search_history_id', 'search_history', ['id'])
    op.create_index('ix_search_history_created_at', 'search_history', ['created_at'])

    op.create_table(
        'user_activities',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('activity_type', sa.String(length=30), nullable=False),
        sa.Column('query', sa.Text(), nullable=True),
        sa.Column('result', sa.Text(), nullable=True),
        sa.Column('session_id', sa.String(length=100), nullable=True),
        sa.Column('success', sa.Boolean(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_user_activities_id', 'user_activities', ['id'])
    op.create_index('ix_user_activities_type', 'user_activities', ['activity_type'])
    op.create_index('ix_user_activities_created_at', 'user_activities', ['created_at'])

    op.create_table(
        'daily_stats',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('total_translations', sa.Integer(), nullable=False),
        sa.Column('total_validations', sa.Integer(), nullable=False),
        sa.Column('total_rag_suggestions', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_daily_stats_id', 'daily_stats', ['id'])
    op.create_index('ix_daily_stats_date', 'daily_stats', ['date'], unique=True)

    op.create_table(
        'rag_suggestion_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('query', sa.String(length=255), nullable=False),
        sa.Column('context', sa.Text(), nullable=True),
        sa.Column('language', sa.String(length=5), server_default='ko', nullable=False),
        sa.Column('suggestion_count', sa.Integer(), nullable=False),
        sa.Column('top_suggestion', sa.Text(), nullable=True),
        sa.Column('rag_version', sa.String(length=20), nullable=False),
        sa.Column('response_time', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_rag_suggestion_logs_id', 'rag_suggestion_logs', ['id'])
    op.create_index('ix_rag_logs_created_at', 'rag_suggestion_logs', ['created_at'])


def downgrade() -> None:
    op.drop_table('rag_suggestion_logs')
    op.drop_table('daily_stats')
    op.drop_table('user_activities')
    op.drop_table('search_history')
    op.drop_table('variable_mappings')
