"""Create skills, candidates and candidate_skills; seed skills

Revision ID: 0001_initial
Revises: None
Create Date: 2025-09-01 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

SKILLS = ["Next.js", "Supabase", "Docker", "TypeScript", "Node.js", "Python", "React", "PostgreSQL"]


def upgrade():
    skills = op.create_table(
        "skills",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(80), nullable=False, unique=True),
    )

    op.create_table(
        "candidates",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("phone", sa.String(40)),
        sa.Column("seniority", sa.String(20), nullable=False),
        sa.Column("profile_summary", sa.Text),
        sa.Column("performance", sa.Integer),
        sa.Column("energy", sa.Integer),
        sa.Column("culture", sa.Integer),
        sa.Column("fit_score", sa.Integer, nullable=False),
        sa.Column("fit_score_classification", sa.String(40), nullable=False),
        sa.Column("llm_analysis_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("llm_analysis", sa.Text),
        sa.Column("llm_analysis_claimed_at", sa.DateTime),
        sa.Column("notification_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_candidates_email", "candidates", ["email"], unique=True)
    op.create_index("ix_candidates_fit_score", "candidates", ["fit_score"])
    op.create_index("ix_candidates_fit_score_classification", "candidates", ["fit_score_classification"])
    op.create_index("ix_candidates_llm_analysis_status", "candidates", ["llm_analysis_status"])
    op.create_index("ix_candidates_notification_status", "candidates", ["notification_status"])
    op.create_index("ix_candidates_created_at", "candidates", ["created_at"])

    op.create_table(
        "candidate_skills",
        sa.Column("candidate_id", sa.Integer, sa.ForeignKey("candidates.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("skill_id", sa.Integer, sa.ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
    )

    op.bulk_insert(skills, [{"name": name} for name in SKILLS])


def downgrade():
    op.drop_table("candidate_skills")
    op.drop_table("candidates")
    op.drop_table("skills")
