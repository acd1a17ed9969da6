"""Initial schema: the stations table.

Revision ID: 001
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── stations ──────────────────────────────────────────────────────
    op.create_table(
        "stations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("city", sa.Text, nullable=False),
        sa.Column("postal_code", sa.String(10), nullable=True),
        sa.Column("lat", sa.Float, nullable=False),
        sa.Column("lon", sa.Float, nullable=False),
        sa.Column("price_diesel", sa.Float, nullable=True),
        sa.Column("price_sp95", sa.Float, nullable=True),
        sa.Column("price_sp98", sa.Float, nullable=True),
        sa.Column("price_e10", sa.Float, nullable=True),
        sa.Column("price_e85", sa.Float, nullable=True),
        sa.Column("price_lpg", sa.Float, nullable=True),
        sa.Column(
            "last_updated",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("lat BETWEEN -90 AND 90", name="ck_stations_lat"),
        sa.CheckConstraint("lon BETWEEN -180 AND 180", name="ck_stations_lon"),
    )
    op.create_index("idx_stations_lat_lon", "stations", ["lat", "lon"])
    op.create_index("idx_stations_city", "stations", ["city"])


def downgrade() -> None:
    op.drop_index("idx_stations_city", table_name="stations")
    op.drop_index("idx_stations_lat_lon", table_name="stations")
    op.drop_table("stations")
