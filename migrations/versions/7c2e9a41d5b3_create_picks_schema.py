"""create_picks_schema

Revision ID: 7c2e9a41d5b3
Revises:
Create Date: 2026-10-19 10:12:44.318021

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "7c2e9a41d5b3"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _is_postgres() -> bool:
    return op.get_bind().dialect.name == "postgresql"


def upgrade() -> None:
    """Create profiles, categories and recommendations.

    On Postgres also installs the username format constraint, RLS policies
    and the ``is_username_available`` / ``update_username`` functions used
    by direct Supabase clients.
    """
    op.create_table(
        "profiles",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=20), nullable=False),
        sa.Column("username_changed_at", sa.DateTime(), nullable=True),
        sa.Column("display_name", sa.String(length=100), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("background_color", sa.String(length=7), server_default="#FFFFFF", nullable=False),
        sa.Column("text_color", sa.String(length=7), server_default="#111827", nullable=False),
        sa.Column("username_color", sa.String(length=7), server_default="#111827", nullable=False),
        sa.Column(
            "social_links",
            postgresql.JSONB(astext_type=sa.Text()).with_variant(sa.JSON(), "sqlite"),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_profiles_username_lower",
        "profiles",
        [sa.text("lower(username)")],
        unique=True,
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("position", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_categories_user_id", "categories", ["user_id"], unique=False)

    op.create_table(
        "recommendations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("category_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("url", sa.String(length=2048), nullable=True),
        sa.Column("image_url", sa.String(length=2048), nullable=True),
        sa.Column("position", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_recommendations_user_id", "recommendations", ["user_id"], unique=False)
    op.create_index(
        "ix_recommendations_category_position",
        "recommendations",
        ["category_id", "position"],
        unique=False,
    )

    if not _is_postgres():
        return

    op.execute("""
        ALTER TABLE profiles
            ADD CONSTRAINT ck_profiles_username_format
            CHECK (username ~ '^[a-z0-9_-]{3,20}$');
    """)

    # --- Row Level Security ---
    for table in ["profiles", "categories", "recommendations"]:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # Public pages are readable by anyone; writes only by the owner.
    op.execute("""
        CREATE POLICY profiles_select ON profiles FOR SELECT USING (true);
    """)
    op.execute("""
        CREATE POLICY profiles_update ON profiles
            FOR UPDATE USING (id = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY profiles_insert ON profiles
            FOR INSERT WITH CHECK (id = (SELECT auth.uid()));
    """)
    for table in ["categories", "recommendations"]:
        op.execute(f"""
            CREATE POLICY {table}_select ON {table}
                FOR SELECT USING (is_active OR user_id = (SELECT auth.uid()));
        """)
        op.execute(f"""
            CREATE POLICY {table}_write ON {table}
                FOR ALL USING (user_id = (SELECT auth.uid()))
                WITH CHECK (user_id = (SELECT auth.uid()));
        """)

    # Answers only yes/no; never exposes the owning row.
    op.execute("""
        CREATE OR REPLACE FUNCTION is_username_available(check_username TEXT)
        RETURNS BOOLEAN
        LANGUAGE sql
        SECURITY DEFINER
        STABLE
        SET search_path = public
        AS $$
            SELECT NOT EXISTS (
                SELECT 1 FROM profiles WHERE lower(username) = lower(check_username)
            );
        $$;
    """)

    op.execute("""
        CREATE OR REPLACE FUNCTION update_username(new_username TEXT)
        RETURNS JSON
        LANGUAGE plpgsql
        SECURITY DEFINER
        SET search_path = public
        AS $$
        DECLARE
            uid UUID := auth.uid();
            normalized TEXT := lower(trim(new_username));
            current_row profiles%ROWTYPE;
            days_left INTEGER;
        BEGIN
            IF uid IS NULL THEN
                RETURN json_build_object('success', false, 'message', 'Not authenticated');
            END IF;

            SELECT * INTO current_row FROM profiles WHERE id = uid FOR UPDATE;
            IF NOT FOUND THEN
                RETURN json_build_object('success', false, 'message', 'Profile not found');
            END IF;

            IF current_row.username = normalized THEN
                RETURN json_build_object('success', true, 'message', 'Username unchanged');
            END IF;

            IF length(normalized) < 3 THEN
                RETURN json_build_object('success', false,
                    'message', 'Username must be at least 3 characters long');
            END IF;
            IF length(normalized) > 20 THEN
                RETURN json_build_object('success', false,
                    'message', 'Username must be at most 20 characters long');
            END IF;
            IF normalized !~ '^[a-z0-9_-]+$' THEN
                RETURN json_build_object('success', false,
                    'message', 'Username can only contain letters, numbers, underscores, and hyphens');
            END IF;

            IF current_row.username_changed_at IS NOT NULL
               AND now() AT TIME ZONE 'utc' < current_row.username_changed_at + interval '30 days' THEN
                days_left := ceil(extract(epoch FROM (
                    current_row.username_changed_at + interval '30 days' - now() AT TIME ZONE 'utc'
                )) / 86400);
                RETURN json_build_object('success', false,
                    'message', format('Username can be changed in %s %s',
                        days_left, CASE WHEN days_left = 1 THEN 'day' ELSE 'days' END));
            END IF;

            IF EXISTS (
                SELECT 1 FROM profiles WHERE lower(username) = normalized AND id <> uid
            ) THEN
                RETURN json_build_object('success', false, 'message', 'Username is already taken');
            END IF;

            BEGIN
                UPDATE profiles
                   SET username = normalized,
                       username_changed_at = now() AT TIME ZONE 'utc',
                       updated_at = now() AT TIME ZONE 'utc'
                 WHERE id = uid;
            EXCEPTION WHEN unique_violation THEN
                RETURN json_build_object('success', false, 'message', 'Username is already taken');
            END;

            RETURN json_build_object('success', true, 'message', 'Username updated successfully');
        END;
        $$;
    """)


def downgrade() -> None:
    """Drop functions, policies and tables."""
    if _is_postgres():
        op.execute("DROP FUNCTION IF EXISTS update_username(TEXT);")
        op.execute("DROP FUNCTION IF EXISTS is_username_available(TEXT);")

        policies = [
            ("recommendations_write", "recommendations"),
            ("recommendations_select", "recommendations"),
            ("categories_write", "categories"),
            ("categories_select", "categories"),
            ("profiles_insert", "profiles"),
            ("profiles_update", "profiles"),
            ("profiles_select", "profiles"),
        ]
        for policy_name, table_name in policies:
            op.execute(f"DROP POLICY IF EXISTS {policy_name} ON {table_name};")

        for table in ["recommendations", "categories", "profiles"]:
            op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")

    op.drop_index("ix_recommendations_category_position", table_name="recommendations")
    op.drop_index("ix_recommendations_user_id", table_name="recommendations")
    op.drop_table("recommendations")
    op.drop_index("ix_categories_user_id", table_name="categories")
    op.drop_table("categories")
    op.drop_index("uq_profiles_username_lower", table_name="profiles")
    op.drop_table("profiles")
