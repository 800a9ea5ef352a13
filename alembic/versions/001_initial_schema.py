"""Create job board schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


roles_enum = postgresql.ENUM('standard', 'superadmin', name='roles', create_type=False)
status_enum = postgresql.ENUM('active', 'deleted', name='status', create_type=False)
worktype_enum = postgresql.ENUM('remote', 'hybrid', 'onsite', 'freelancer', name='worktype', create_type=False)


def upgrade() -> None:
    """Create admins, admin_bootstrap, positions, candidates and applications tables."""
    bind = op.get_bind()
    roles_enum.create(bind, checkfirst=True)
    status_enum.create(bind, checkfirst=True)
    worktype_enum.create(bind, checkfirst=True)

    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('first_name', sa.String(length=60), nullable=False),
        sa.Column('last_name', sa.String(length=60), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', roles_enum, nullable=False, server_default='standard'),
        sa.Column('status', status_enum, nullable=False, server_default='active'),
        sa.Column('created_by_admin_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['created_by_admin_id'], ['admins.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_admins_email', 'admins', ['email'], unique=True)

    op.create_table(
        'admin_bootstrap',
        sa.Column('id', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('admin_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['admin_id'], ['admins.id']),
        sa.CheckConstraint('id = 1', name='ck_admin_bootstrap_single_row'),
    )

    op.create_table(
        'positions',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=255), nullable=False),
        sa.Column('work_type', worktype_enum, nullable=False, server_default='onsite'),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', status_enum, nullable=False, server_default='active'),
        sa.Column('created_by_admin_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['created_by_admin_id'], ['admins.id']),
    )
    op.create_index('ix_positions_category', 'positions', ['category'])
    op.create_index('idx_positions_status_created', 'positions', ['status', 'created_at'])

    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('full_name', sa.String(length=180), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('aliases', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_candidates_email', 'candidates', ['email'], unique=True)

    op.create_table(
        'applications',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('candidate_id', sa.Integer(), nullable=False),
        sa.Column('position_id', sa.Integer(), nullable=False),
        sa.Column('resume_file_name', sa.String(length=255), nullable=True),
        sa.Column('resume_file_path', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidates.id']),
        sa.ForeignKeyConstraint(['position_id'], ['positions.id']),
    )
    op.create_index('ix_applications_candidate_id', 'applications', ['candidate_id'])
    op.create_index('ix_applications_position_id', 'applications', ['position_id'])
    op.create_index('idx_applications_created', 'applications', ['created_at'])


def downgrade() -> None:
    """Drop the job board schema."""
    op.drop_index('idx_applications_created', table_name='applications')
    op.drop_index('ix_applications_position_id', table_name='applications')
    op.drop_index('ix_applications_candidate_id', table_name='applications')
    op.drop_table('applications')
    op.drop_index('ix_candidates_email', table_name='candidates')
    op.drop_table('candidates')
    op.drop_index('idx_positions_status_created', table_name='positions')
    op.drop_index('ix_positions_category', table_name='positions')
    op.drop_table('positions')
    op.drop_table('admin_bootstrap')
    op.drop_index('ix_admins_email', table_name='admins')
    op.drop_table('admins')

    bind = op.get_bind()
    worktype_enum.drop(bind, checkfirst=True)
    status_enum.drop(bind, checkfirst=True)
    roles_enum.drop(bind, checkfirst=True)
