"""initial_job_portal_schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 12:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    """Create users, jobs, profiles and applications."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'jobs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('employer_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('requirements', JSON_TYPE, nullable=True),
        sa.Column('skills', JSON_TYPE, nullable=True),
        sa.Column('salary_min', sa.Float(), nullable=True),
        sa.Column('salary_max', sa.Float(), nullable=True),
        sa.Column('job_type', sa.String(length=20), nullable=False),
        sa.Column('posted_date', sa.DateTime(), nullable=False),
        sa.Column('application_deadline', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('applications_count', sa.Integer(), nullable=False),
        sa.Column('is_external', sa.Boolean(), nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=True),
        sa.Column('source', sa.String(length=20), nullable=False),
        sa.Column('apply_link', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('company_type', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['employer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_jobs_id', 'jobs', ['id'])
    op.create_index('ix_jobs_employer_id', 'jobs', ['employer_id'])
    op.create_index('ix_jobs_title', 'jobs', ['title'])
    op.create_index('ix_jobs_location', 'jobs', ['location'])
    op.create_index('ix_jobs_job_type', 'jobs', ['job_type'])
    op.create_index('ix_jobs_posted_date', 'jobs', ['posted_date'])
    op.create_index('ix_jobs_is_external', 'jobs', ['is_external'])
    op.create_index('idx_jobs_active_posted', 'jobs', ['is_active', 'posted_date'])
    op.create_index('idx_jobs_external', 'jobs', ['external_id', 'source'])

    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('candidate_id', sa.Uuid(), nullable=False),
        sa.Column('headline', sa.String(length=150), nullable=True),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('skills', JSON_TYPE, nullable=True),
        sa.Column('experience', JSON_TYPE, nullable=True),
        sa.Column('education', JSON_TYPE, nullable=True),
        sa.Column('resume_url', sa.Text(), nullable=True),
        sa.Column('contact', JSON_TYPE, nullable=True),
        sa.Column('is_visible', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['candidate_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_id', 'profiles', ['id'])
    op.create_index('ix_profiles_candidate_id', 'profiles', ['candidate_id'], unique=True)

    op.create_table(
        'applications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('job_id', sa.Uuid(), nullable=False),
        sa.Column('candidate_id', sa.Uuid(), nullable=False),
        sa.Column('employer_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('application_date', sa.DateTime(), nullable=False),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('profile_snapshot', JSON_TYPE, nullable=True),
        sa.Column('notes', JSON_TYPE, nullable=True),
        sa.Column('assignment_submission_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id']),
        sa.ForeignKeyConstraint(['candidate_id'], ['users.id']),
        sa.ForeignKeyConstraint(['employer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_id', 'candidate_id', name='unique_candidate_job_application'),
    )
    op.create_index('ix_applications_id', 'applications', ['id'])
    op.create_index('ix_applications_job_id', 'applications', ['job_id'])
    op.create_index('ix_applications_candidate_id', 'applications', ['candidate_id'])
    op.create_index('ix_applications_employer_id', 'applications', ['employer_id'])
    op.create_index('ix_applications_status', 'applications', ['status'])
    op.create_index('ix_applications_application_date', 'applications', ['application_date'])


def downgrade() -> None:
    """Drop every table created by upgrade."""
    op.drop_table('applications')
    op.drop_table('profiles')
    op.drop_table('jobs')
    op.drop_table('users')
