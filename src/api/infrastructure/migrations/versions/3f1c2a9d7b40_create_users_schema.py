"""create users schema

Create the users table, the shared pronouns table, the one-to-one satellite
tables and the participation tables that reference users. Name search is
served by a GIN index over the simple-configuration tsvector of the full
name.

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PARTICIPATION_TABLES = (
    ("hackathon_applications", "hackathon_id"),
    ("meals", "hackathon_id"),
    ("hackathon_checkin", "hackathon_id"),
    ("event_attendance", "event_id"),
)


def _user_fk(table: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        ["user_id"],
        ["users.id"],
        name=f"fk_{table}_user_id",
        ondelete="RESTRICT",
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "pronouns",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("subjective", sa.String(length=64), nullable=False),
        sa.Column("objective", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("subjective", "objective", name="uq_pronouns_pair"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone_number", sa.String(length=32), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="NORMAL"),
        sa.Column("gender", sa.String(length=64), nullable=True),
        sa.Column("race", postgresql.ARRAY(sa.String(length=255)), nullable=True),
        sa.Column("years_of_experience", sa.Float(), nullable=True),
        sa.Column("shirt_size", sa.String(length=8), nullable=True),
        sa.Column("pronoun_id", sa.Integer(), nullable=True),
        sa.Column("oauth_uid", sa.String(length=255), nullable=False),
        sa.Column("oauth_provider", sa.String(length=16), nullable=False),
        sa.ForeignKeyConstraint(
            ["pronoun_id"],
            ["pronouns.id"],
            name="fk_users_pronoun_id",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "oauth_provider", "oauth_uid", name="uq_users_oauth_identity"
        ),
    )
    op.execute(
        "CREATE INDEX ix_users_full_name_tsv ON users USING GIN "
        "(to_tsvector('simple', first_name || ' ' || last_name))"
    )

    op.create_table(
        "mailing_addresses",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("country", sa.String(length=255), nullable=False),
        sa.Column("state", sa.String(length=255), nullable=False),
        sa.Column("city", sa.String(length=255), nullable=False),
        sa.Column("postal_code", sa.String(length=32), nullable=False),
        sa.Column(
            "address_lines", postgresql.ARRAY(sa.String(length=255)), nullable=False
        ),
        _user_fk("mailing_addresses"),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "mlh_terms",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("send_messages", sa.Boolean(), nullable=False),
        sa.Column("share_info", sa.Boolean(), nullable=False),
        sa.Column("code_of_conduct", sa.Boolean(), nullable=False),
        _user_fk("mlh_terms"),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "education_info",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("major", sa.String(length=255), nullable=False),
        sa.Column("graduation_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("level", sa.String(length=16), nullable=True),
        _user_fk("education_info"),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "api_keys",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(length=128), nullable=False),
        sa.Column(
            "created",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        _user_fk("api_keys"),
        sa.PrimaryKeyConstraint("user_id"),
    )

    for table, reference in PARTICIPATION_TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=False),
            sa.Column(reference, sa.String(length=64), nullable=False),
            *(
                [sa.Column("meal", sa.String(length=64), nullable=False)]
                if table == "meals"
                else []
            ),
            _user_fk(table),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f(f"ix_{table}_user_id"), table, ["user_id"])


def downgrade() -> None:
    """Downgrade schema."""
    for table, _ in reversed(PARTICIPATION_TABLES):
        op.drop_index(op.f(f"ix_{table}_user_id"), table_name=table)
        op.drop_table(table)
    op.drop_table("api_keys")
    op.drop_table("education_info")
    op.drop_table("mlh_terms")
    op.drop_table("mailing_addresses")
    op.execute("DROP INDEX IF EXISTS ix_users_full_name_tsv")
    op.drop_table("users")
    op.drop_table("pronouns")
