"""welfare_center_schema

Revision ID: 0001_welfare_center
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_welfare_center'
down_revision = None
branch_labels = None
depends_on = None

admin_role = sa.Enum('ADMIN', 'STAFF', name='adminrole')
admin_status = sa.Enum('PENDING', 'APPROVED', 'REJECTED', 'SUSPENDED', name='adminstatus')
severity_level = sa.Enum('MILD', 'MODERATE', 'SEVERE', name='severitylevel')
question_type = sa.Enum(
    'SINGLE_CHOICE', 'MULTIPLE_CHOICE', 'TEXT', 'SCALE', 'YES_NO', 'DATE', 'TIME', name='questiontype'
)
file_type = sa.Enum('IMAGE', 'AUDIO', 'VIDEO', 'DOCUMENT', 'TEXT', name='filetype')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'institutions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('business_number', sa.String(20), nullable=True, unique=True),
        sa.Column('registration_number', sa.String(50), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('email', sa.String(100), nullable=True),
        sa.Column('website', sa.String(200), nullable=True),
        sa.Column('director_name', sa.String(50), nullable=True),
        sa.Column('contact_person', sa.String(50), nullable=True),
        sa.Column('contact_phone', sa.String(20), nullable=True),
        sa.Column('contact_email', sa.String(100), nullable=True),
        sa.Column('timezone', sa.String(50), nullable=False),
        sa.Column('locale', sa.String(10), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_institutions_id', 'institutions', ['id'])

    op.create_table(
        'system_admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(100), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_system_admins_id', 'system_admins', ['id'])
    op.create_index('ix_system_admins_email', 'system_admins', ['email'], unique=True)

    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('institution_id', sa.Integer(), sa.ForeignKey('institutions.id'), nullable=False),
        sa.Column('email', sa.String(100), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('role', admin_role, nullable=False),
        sa.Column('status', admin_status, nullable=False),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('system_admins.id'), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('institution_id', 'email', name='uq_admin_institution_email'),
    )
    op.create_index('ix_admins_id', 'admins', ['id'])
    op.create_index('ix_admins_email', 'admins', ['email'])
    op.create_index('ix_admins_institution_id', 'admins', ['institution_id'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('institution_id', sa.Integer(), sa.ForeignKey('institutions.id'), nullable=False),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('severity', severity_level, nullable=False),
        sa.Column('guardian_name', sa.String(50), nullable=True),
        sa.Column('guardian_relationship', sa.String(20), nullable=True),
        sa.Column('guardian_phone', sa.String(20), nullable=True),
        sa.Column('guardian_email', sa.String(100), nullable=True),
        sa.Column('guardian_address', sa.Text(), nullable=True),
        sa.Column('emergency_contacts', sa.JSON(), nullable=False),
        sa.Column('care_notes', sa.Text(), nullable=True),
        sa.Column('fcm_token', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('institution_id', 'username', name='uq_user_institution_username'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_institution_id', 'users', ['institution_id'])

    op.create_table(
        'user_groups',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('institution_id', sa.Integer(), sa.ForeignKey('institutions.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('member_count', sa.Integer(), nullable=False),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('admins.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('institution_id', 'name', name='uq_group_institution_name'),
    )
    op.create_index('ix_user_groups_id', 'user_groups', ['id'])
    op.create_index('ix_user_groups_institution_id', 'user_groups', ['institution_id'])

    op.create_table(
        'user_group_members',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('user_groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('added_by', sa.Integer(), sa.ForeignKey('admins.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('group_id', 'user_id', name='uq_group_member'),
    )
    op.create_index('ix_user_group_members_id', 'user_group_members', ['id'])
    op.create_index('ix_user_group_members_group_id', 'user_group_members', ['group_id'])
    op.create_index('ix_user_group_members_user_id', 'user_group_members', ['user_id'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('institution_id', sa.Integer(), sa.ForeignKey('institutions.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_path', sa.String(500), nullable=True),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('admins.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('institution_id', 'name', name='uq_category_institution_name'),
    )
    op.create_index('ix_categories_id', 'categories', ['id'])
    op.create_index('ix_categories_institution_id', 'categories', ['institution_id'])

    op.create_table(
        'questions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('institution_id', sa.Integer(), sa.ForeignKey('institutions.id'), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('question_type', question_type, nullable=False),
        sa.Column('options', sa.JSON(), nullable=True),
        sa.Column('allow_other_option', sa.Boolean(), nullable=False),
        sa.Column('other_option_label', sa.String(100), nullable=True),
        sa.Column('other_option_placeholder', sa.String(200), nullable=True),
        sa.Column('is_required', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('admins.id'), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_questions_id', 'questions', ['id'])
    op.create_index('ix_questions_institution_id', 'questions', ['institution_id'])
    op.create_index('ix_questions_category_id', 'questions', ['category_id'])

    op.create_table(
        'question_assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('institution_id', sa.Integer(), sa.ForeignKey('institutions.id'), nullable=False),
        sa.Column('question_id', sa.Integer(), sa.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('user_groups.id', ondelete='CASCADE'), nullable=True),
        sa.Column('priority', sa.Integer(), nullable=False),
        sa.Column('assigned_by', sa.Integer(), sa.ForeignKey('admins.id'), nullable=True),
        sa.Column('assigned_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('question_id', 'user_id', name='uq_assignment_question_user'),
        sa.UniqueConstraint('question_id', 'group_id', name='uq_assignment_question_group'),
        sa.CheckConstraint(
            '(user_id IS NOT NULL AND group_id IS NULL) OR (user_id IS NULL AND group_id IS NOT NULL)',
            name='ck_assignment_single_target',
        ),
        sa.CheckConstraint('priority >= 1', name='ck_assignment_priority'),
    )
    op.create_index('ix_question_assignments_id', 'question_assignments', ['id'])
    op.create_index('ix_question_assignments_institution_id', 'question_assignments', ['institution_id'])
    op.create_index('ix_question_assignments_question_id', 'question_assignments', ['question_id'])
    op.create_index('ix_question_assignments_user_id', 'question_assignments', ['user_id'])
    op.create_index('ix_question_assignments_group_id', 'question_assignments', ['group_id'])

    op.create_table(
        'question_responses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('assignment_id', sa.Integer(),
                  sa.ForeignKey('question_assignments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_id', sa.Integer(), sa.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('institution_id', sa.Integer(), sa.ForeignKey('institutions.id'), nullable=False),
        sa.Column('response_data', sa.JSON(), nullable=False),
        sa.Column('response_text', sa.Text(), nullable=True),
        sa.Column('other_response', sa.Text(), nullable=True),
        sa.Column('response_time_seconds', sa.Integer(), nullable=True),
        sa.Column('device_info', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_question_responses_id', 'question_responses', ['id'])
    op.create_index('ix_question_responses_assignment_id', 'question_responses', ['assignment_id'])
    op.create_index('ix_question_responses_user_id', 'question_responses', ['user_id'])
    op.create_index('ix_question_responses_question_id', 'question_responses', ['question_id'])
    op.create_index('ix_question_responses_institution_id', 'question_responses', ['institution_id'])
    op.create_index('ix_question_responses_submitted_at', 'question_responses', ['submitted_at'])

    op.create_table(
        'uploads',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('institution_id', sa.Integer(), sa.ForeignKey('institutions.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(200), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('location_name', sa.String(100), nullable=True),
        sa.Column('admin_read', sa.Boolean(), nullable=False),
        sa.Column('admin_response', sa.Text(), nullable=True),
        sa.Column('admin_response_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('admin_id', sa.Integer(), sa.ForeignKey('admins.id'), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_uploads_id', 'uploads', ['id'])
    op.create_index('ix_uploads_institution_id', 'uploads', ['institution_id'])
    op.create_index('ix_uploads_user_id', 'uploads', ['user_id'])

    op.create_table(
        'upload_files',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('upload_id', sa.Integer(), sa.ForeignKey('uploads.id', ondelete='CASCADE'), nullable=False),
        sa.Column('file_type', file_type, nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('original_name', sa.String(255), nullable=True),
        sa.Column('file_path', sa.String(500), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=True),
        sa.Column('mime_type', sa.String(100), nullable=True),
        sa.Column('upload_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_upload_files_id', 'upload_files', ['id'])
    op.create_index('ix_upload_files_upload_id', 'upload_files', ['upload_id'])


def downgrade() -> None:
    for table in (
        'upload_files',
        'uploads',
        'question_responses',
        'question_assignments',
        'questions',
        'categories',
        'user_group_members',
        'user_groups',
        'users',
        'admins',
        'system_admins',
        'institutions',
    ):
        op.drop_table(table)
    for enum in (file_type, question_type, severity_level, admin_status, admin_role):
        enum.drop(op.get_bind(), checkfirst=True)
