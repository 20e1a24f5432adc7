"""Initial schema: autism_centers.

Revision ID: 001
Create Date: 2026-10-16
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── autism_centers ────────────────────────────────────────────────
    op.create_table(
        "autism_centers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "diagnostic",
                "therapy",
                "support",
                "education",
                name="locationtype",
            ),
            nullable=False,
        ),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("website", sa.String(300), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("services", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("age_groups", sa.JSON, nullable=False, server_default="[]"),
        sa.Column(
            "insurance_accepted", sa.JSON, nullable=False, server_default="[]"
        ),
        sa.Column("rating", sa.Float, nullable=True),
        sa.Column(
            "verified", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_autism_centers_type", "autism_centers", ["type"])
    op.create_index("idx_autism_centers_verified", "autism_centers", ["verified"])
    op.create_index(
        "idx_autism_centers_lat_lng", "autism_centers", ["latitude", "longitude"]
    )


def downgrade() -> None:
    op.drop_table("autism_centers")
    op.execute("DROP TYPE IF EXISTS locationtype")
