"""create_interview_schema

Revision ID: 3f9c2a7d1e04
Revises:
Create Date: 2026-10-17 09:12:41.503226

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1e04'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('user_type', sa.Enum('ADMIN', 'CANDIDATE', name='usertype'), nullable=False),
        sa.Column('admin_role', sa.Enum('ADMIN', 'USER', name='adminrole'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_user_type'), 'users', ['user_type'], unique=False)

    op.create_table(
        'departments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_departments_name'), 'departments', ['name'], unique=True)

    op.create_table(
        'stacks',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_stacks_name'), 'stacks', ['name'], unique=True)

    op.create_table(
        'positions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('department_id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', 'department_id', name='uq_positions_name_department')
    )
    op.create_index(op.f('ix_positions_name'), 'positions', ['name'], unique=False)
    op.create_index(op.f('ix_positions_department_id'), 'positions', ['department_id'], unique=False)

    op.create_table(
        'problems',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('difficulty', sa.Enum('EASY', 'MEDIUM', 'HARD', name='problemdifficulty'), nullable=False),
        sa.Column('department_id', sa.String(length=36), nullable=False),
        sa.Column('position_id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['position_id'], ['positions.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_problems_title'), 'problems', ['title'], unique=False)
    op.create_index(op.f('ix_problems_difficulty'), 'problems', ['difficulty'], unique=False)
    op.create_index(op.f('ix_problems_department_id'), 'problems', ['department_id'], unique=False)
    op.create_index(op.f('ix_problems_position_id'), 'problems', ['position_id'], unique=False)

    op.create_table(
        'problem_stacks',
        sa.Column('problem_id', sa.String(length=36), nullable=False),
        sa.Column('stack_id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['problem_id'], ['problems.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['stack_id'], ['stacks.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('problem_id', 'stack_id')
    )

    op.create_table(
        'candidates',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('department_id', sa.String(length=36), nullable=False),
        sa.Column('position_id', sa.String(length=36), nullable=False),
        sa.Column('problem_id', sa.String(length=36), nullable=False),
        sa.Column('scheduled_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=True),
        sa.Column('submission_time', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['position_id'], ['positions.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['problem_id'], ['problems.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_candidates_email'), 'candidates', ['email'], unique=True)
    op.create_index(op.f('ix_candidates_department_id'), 'candidates', ['department_id'], unique=False)
    op.create_index(op.f('ix_candidates_position_id'), 'candidates', ['position_id'], unique=False)
    op.create_index(op.f('ix_candidates_problem_id'), 'candidates', ['problem_id'], unique=False)
    op.create_index(op.f('ix_candidates_created_at'), 'candidates', ['created_at'], unique=False)

    op.create_table(
        'submissions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('candidate_id', sa.String(length=36), nullable=False),
        sa.Column('problem_id', sa.String(length=36), nullable=False),
        sa.Column('position_id', sa.String(length=36), nullable=False),
        sa.Column('submission_time', sa.DateTime(), nullable=False),
        sa.Column('answers', JSONType, nullable=False),
        sa.Column('remarks', JSONType, nullable=False),
        sa.Column('recommended_for_next_step', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidates.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['problem_id'], ['problems.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['position_id'], ['positions.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_submissions_candidate_id'), 'submissions', ['candidate_id'], unique=True)
    op.create_index(op.f('ix_submissions_problem_id'), 'submissions', ['problem_id'], unique=False)
    op.create_index(op.f('ix_submissions_position_id'), 'submissions', ['position_id'], unique=False)
    op.create_index(op.f('ix_submissions_submission_time'), 'submissions', ['submission_time'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('submissions')
    op.drop_table('candidates')
    op.drop_table('problem_stacks')
    op.drop_table('problems')
    op.drop_table('positions')
    op.drop_table('stacks')
    op.drop_table('departments')
    op.drop_table('users')

    # Enum types outlive their tables on PostgreSQL
    sa.Enum(name='problemdifficulty').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='adminrole').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='usertype').drop(op.get_bind(), checkfirst=True)
