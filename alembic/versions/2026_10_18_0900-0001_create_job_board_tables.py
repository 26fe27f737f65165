"""create_job_board_tables

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    """Create users, job_offers and job_applications."""

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='candidate'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'job_offers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('contract_type', sa.String(length=100), nullable=False),
        sa.Column('salary_min', sa.Numeric(10, 2), nullable=True),
        sa.Column('salary_max', sa.Numeric(10, 2), nullable=True),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('benefits', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('expires_at', sa.Date(), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_job_offers_title', 'job_offers', ['title'])
    op.create_index('ix_job_offers_is_active', 'job_offers', ['is_active'])
    op.create_index('ix_job_offers_user_id', 'job_offers', ['user_id'])

    op.create_table(
        'job_applications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'job_offer_id', sa.Integer(), sa.ForeignKey('job_offers.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('last_status_change', sa.DateTime(), nullable=True),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('cv_path', sa.String(length=500), nullable=True),
        sa.Column('recruiter_notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'job_offer_id', name='unique_candidate_job_offer_application'),
    )
    op.create_index('ix_job_applications_user_id', 'job_applications', ['user_id'])
    op.create_index('ix_job_applications_job_offer_id', 'job_applications', ['job_offer_id'])


def downgrade() -> None:
    """Drop the job board tables."""

    op.drop_index('ix_job_applications_job_offer_id', table_name='job_applications')
    op.drop_index('ix_job_applications_user_id', table_name='job_applications')
    op.drop_table('job_applications')

    op.drop_index('ix_job_offers_user_id', table_name='job_offers')
    op.drop_index('ix_job_offers_is_active', table_name='job_offers')
    op.drop_index('ix_job_offers_title', table_name='job_offers')
    op.drop_table('job_offers')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
