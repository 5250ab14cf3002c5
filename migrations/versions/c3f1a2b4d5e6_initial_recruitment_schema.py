"""initial recruitment schema

Revision ID: c3f1a2b4d5e6
Revises:
Create Date: 2026-03-02 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = 'c3f1a2b4d5e6'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _org_fk() -> sa.Column:
    return sa.Column(
        'organization_id',
        sa.Integer(),
        sa.ForeignKey('organizations.id', ondelete='CASCADE'),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'organizations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_organizations_name', 'organizations', ['name'])

    op.create_table(
        'profiles',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'])

    op.create_table(
        'organization_members',
        sa.Column('id', sa.Integer(), primary_key=True),
        _org_fk(),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('organization_id', 'user_id', name='uq_organization_members_org_user'),
    )
    op.create_index('ix_organization_members_organization_id', 'organization_members', ['organization_id'])
    op.create_index('ix_organization_members_user_id', 'organization_members', ['user_id'])

    op.create_table(
        'organization_invitations',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        _org_fk(),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('invitation_code', sqlmodel.sql.sqltypes.AutoString(), nullable=False, unique=True),
        sa.Column('created_by', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('used_at', sa.DateTime(), nullable=True),
        sa.Column('used_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
    )
    op.create_index('ix_organization_invitations_organization_id', 'organization_invitations', ['organization_id'])
    op.create_index('ix_organization_invitations_email', 'organization_invitations', ['email'])
    op.create_index('ix_organization_invitations_invitation_code', 'organization_invitations', ['invitation_code'])
    op.create_index('ix_organization_invitations_expires_at', 'organization_invitations', ['expires_at'])
    op.create_index(
        'uq_organization_invitations_unused_email',
        'organization_invitations',
        ['organization_id', 'email'],
        unique=True,
        sqlite_where=sa.text('used_at IS NULL'),
        postgresql_where=sa.text('used_at IS NULL'),
    )

    op.create_table(
        'api_keys',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('key_hash', sqlmodel.sql.sqltypes.AutoString(), nullable=False, unique=True),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_used_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_api_keys_key_hash', 'api_keys', ['key_hash'])
    op.create_index('ix_api_keys_user_id', 'api_keys', ['user_id'])

    op.create_table(
        'candidates',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        _org_fk(),
        sa.Column('first_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('last_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('phone', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('current_title', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_candidates_organization_id', 'candidates', ['organization_id'])
    op.create_index('ix_candidates_email', 'candidates', ['email'])
    op.create_index('ix_candidates_status', 'candidates', ['status'])

    op.create_table(
        'companies',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        _org_fk(),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('industry', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('website', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('city', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('state', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_companies_organization_id', 'companies', ['organization_id'])
    op.create_index('ix_companies_name', 'companies', ['name'])

    op.create_table(
        'company_contacts',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        _org_fk(),
        sa.Column('company_id', sqlmodel.sql.sqltypes.AutoString(),
                  sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('phone', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_company_contacts_organization_id', 'company_contacts', ['organization_id'])
    op.create_index('ix_company_contacts_company_id', 'company_contacts', ['company_id'])
    op.create_index(
        'uq_company_contacts_primary',
        'company_contacts',
        ['company_id'],
        unique=True,
        sqlite_where=sa.text('is_primary'),
        postgresql_where=sa.text('is_primary'),
    )

    op.create_table(
        'jobs',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        _org_fk(),
        sa.Column('company_id', sqlmodel.sql.sqltypes.AutoString(),
                  sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('employment_type', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('priority', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('salary_min', sa.Integer(), nullable=True),
        sa.Column('salary_max', sa.Integer(), nullable=True),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('created_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_jobs_organization_id', 'jobs', ['organization_id'])
    op.create_index('ix_jobs_company_id', 'jobs', ['company_id'])
    op.create_index('ix_jobs_title', 'jobs', ['title'])
    op.create_index('ix_jobs_status', 'jobs', ['status'])

    op.create_table(
        'applications',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        _org_fk(),
        sa.Column('candidate_id', sqlmodel.sql.sqltypes.AutoString(),
                  sa.ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('job_id', sqlmodel.sql.sqltypes.AutoString(),
                  sa.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('applied_date', sa.Date(), nullable=False),
        sa.Column('submitted_to_client_date', sa.Date(), nullable=True),
        sa.Column('interview_date', sa.Date(), nullable=True),
        sa.Column('placed_date', sa.Date(), nullable=True),
        sa.Column('offered_salary', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('candidate_id', 'job_id', name='uq_applications_candidate_job'),
    )
    op.create_index('ix_applications_organization_id', 'applications', ['organization_id'])
    op.create_index('ix_applications_candidate_id', 'applications', ['candidate_id'])
    op.create_index('ix_applications_job_id', 'applications', ['job_id'])
    op.create_index('ix_applications_status', 'applications', ['status'])

    op.create_table(
        'interviews',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        _org_fk(),
        sa.Column('application_id', sqlmodel.sql.sqltypes.AutoString(),
                  sa.ForeignKey('applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('interview_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('scheduled_date', sa.DateTime(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('location', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('interviewer_name', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('created_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_interviews_organization_id', 'interviews', ['organization_id'])
    op.create_index('ix_interviews_application_id', 'interviews', ['application_id'])
    op.create_index('ix_interviews_scheduled_date', 'interviews', ['scheduled_date'])
    op.create_index('ix_interviews_status', 'interviews', ['status'])

    op.create_table(
        'documents',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        _org_fk(),
        sa.Column('entity_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('entity_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('document_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('file_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('file_path', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('file_size_bytes', sa.Integer(), nullable=False),
        sa.Column('mime_type', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        sa.Column('uploaded_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_documents_organization_id', 'documents', ['organization_id'])
    op.create_index('ix_documents_entity', 'documents', ['entity_type', 'entity_id'])
    op.create_index(
        'uq_documents_primary_per_type',
        'documents',
        ['entity_type', 'entity_id', 'document_type'],
        unique=True,
        sqlite_where=sa.text('is_primary'),
        postgresql_where=sa.text('is_primary'),
    )

    op.create_table(
        'shortlists',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        _org_fk(),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_shortlists_organization_id', 'shortlists', ['organization_id'])
    op.create_index('ix_shortlists_name', 'shortlists', ['name'])

    op.create_table(
        'shortlist_candidates',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        sa.Column('shortlist_id', sqlmodel.sql.sqltypes.AutoString(),
                  sa.ForeignKey('shortlists.id', ondelete='CASCADE'), nullable=False),
        sa.Column('candidate_id', sqlmodel.sql.sqltypes.AutoString(),
                  sa.ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('added_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('added_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('shortlist_id', 'candidate_id', name='uq_shortlist_candidates_pair'),
    )
    op.create_index('ix_shortlist_candidates_shortlist_id', 'shortlist_candidates', ['shortlist_id'])
    op.create_index('ix_shortlist_candidates_candidate_id', 'shortlist_candidates', ['candidate_id'])

    op.create_table(
        'activities',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        _org_fk(),
        sa.Column('entity_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('entity_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('activity_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('subject', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('scheduled_date', sa.DateTime(), nullable=False),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_activities_organization_id', 'activities', ['organization_id'])
    op.create_index('ix_activities_entity', 'activities', ['entity_type', 'entity_id'])
    op.create_index('ix_activities_scheduled_date', 'activities', ['scheduled_date'])


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        'activities',
        'shortlist_candidates',
        'shortlists',
        'documents',
        'interviews',
        'applications',
        'jobs',
        'company_contacts',
        'companies',
        'candidates',
        'api_keys',
        'organization_invitations',
        'organization_members',
        'profiles',
        'organizations',
    ):
        op.drop_table(table)
