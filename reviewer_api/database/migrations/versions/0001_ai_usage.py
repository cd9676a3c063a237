"""Add AI usage tracking.

This migration:
- Creates ai_usage table holding one counter per user per UTC day
- Creates unlimited_users table for users exempt from the daily cap
- Creates check_and_increment_ai_usage function doing the limit check and
  the increment in a single statement
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


CHECK_AND_INCREMENT_FUNCTION = """
CREATE OR REPLACE FUNCTION check_and_increment_ai_usage(
    p_user_id TEXT,
    p_date DATE,
    p_limit INTEGER
)
RETURNS TABLE (allowed BOOLEAN, new_count INTEGER)
LANGUAGE plpgsql
AS $$
DECLARE
    v_count INTEGER;
BEGIN
    IF p_limit <= 0 THEN
        RETURN QUERY SELECT FALSE, 0;
        RETURN;
    END IF;

    INSERT INTO ai_usage AS u (user_id, usage_date, generation_count)
    VALUES (p_user_id, p_date, 1)
    ON CONFLICT (user_id, usage_date)
    DO UPDATE SET generation_count = u.generation_count + 1,
                  updated_at = NOW()
    WHERE u.generation_count < p_limit
    RETURNING u.generation_count INTO v_count;

    IF v_count IS NULL THEN
        SELECT generation_count INTO v_count
        FROM ai_usage
        WHERE user_id = p_user_id AND usage_date = p_date;
        RETURN QUERY SELECT FALSE, v_count;
    ELSE
        RETURN QUERY SELECT TRUE, v_count;
    END IF;
END;
$$;
"""


def upgrade() -> None:
    # ============================================
    # Create ai_usage table
    # ============================================
    op.create_table(
        "ai_usage",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("usage_date", sa.Date(), nullable=False),
        sa.Column("generation_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.UniqueConstraint("user_id", "usage_date", name="UQ_ai_usage_user_date"),
    )

    # ============================================
    # Create unlimited_users table
    # ============================================
    op.create_table(
        "unlimited_users",
        sa.Column("user_id", sa.Text(), primary_key=True, nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    )

    op.execute(CHECK_AND_INCREMENT_FUNCTION)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS check_and_increment_ai_usage(TEXT, DATE, INTEGER)")
    op.drop_table("unlimited_users")
    op.drop_table("ai_usage")
