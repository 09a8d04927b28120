"""Create students table.

Revision ID: 0001_create_students
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_create_students'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the students table and its lookup indexes."""
    op.create_table(
        'students',
        sa.Column('id', sa.BigInteger().with_variant(sa.Integer(), 'sqlite'), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('graduation_year', sa.Integer(), nullable=False),
        sa.Column('phone_number', sa.String(20), nullable=False),
        sa.Column('gpa', sa.Numeric(3, 2), nullable=False),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(50), nullable=True),
        sa.Column('latitude', sa.Numeric(10, 7), nullable=True),
        sa.Column('longitude', sa.Numeric(10, 7), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('email', name='uq_students_email'),
        sa.CheckConstraint('gpa >= 0 AND gpa <= 4', name='ck_students_gpa_range'),
    )
    op.create_index('idx_students_graduation_year', 'students', ['graduation_year'])
    op.create_index('idx_students_gpa', 'students', ['gpa'])
    op.create_index('idx_students_location', 'students', ['city', 'state'])


def downgrade() -> None:
    """Drop the students table."""
    op.drop_index('idx_students_location', table_name='students')
    op.drop_index('idx_students_gpa', table_name='students')
    op.drop_index('idx_students_graduation_year', table_name='students')
    op.drop_table('students')
