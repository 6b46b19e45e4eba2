"""Location directory: countries, provinces and districts.

Revision ID: 20261003000000
Revises: 20261002000000
Create Date: 2026-10-03

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20261003000000"
down_revision: Union[str, None] = "20261002000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "countries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("eng_name", sa.String(length=191), nullable=False),
        sa.Column("ar_name", sa.String(length=191), nullable=False),
        sa.Column("currency_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["currency_id"], ["currencies.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_countries_eng_name"), "countries", ["eng_name"], unique=True)
    op.create_index(op.f("ix_countries_ar_name"), "countries", ["ar_name"], unique=True)
    op.create_index(op.f("ix_countries_currency_id"), "countries", ["currency_id"], unique=False)

    op.create_table(
        "provinces",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("eng_name", sa.String(length=191), nullable=False),
        sa.Column("ar_name", sa.String(length=191), nullable=False),
        sa.Column("country_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["country_id"], ["countries.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("country_id", "eng_name", name="uq_provinces_country_eng_name"),
        sa.UniqueConstraint("country_id", "ar_name", name="uq_provinces_country_ar_name"),
    )
    op.create_index(op.f("ix_provinces_country_id"), "provinces", ["country_id"], unique=False)
    op.create_index(op.f("ix_provinces_eng_name"), "provinces", ["eng_name"], unique=False)
    op.create_index(op.f("ix_provinces_ar_name"), "provinces", ["ar_name"], unique=False)

    op.create_table(
        "districts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("eng_name", sa.String(length=191), nullable=False),
        sa.Column("ar_name", sa.String(length=191), nullable=False),
        sa.Column("province_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["province_id"], ["provinces.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("province_id", "eng_name", name="uq_districts_province_eng_name"),
        sa.UniqueConstraint("province_id", "ar_name", name="uq_districts_province_ar_name"),
    )
    op.create_index(op.f("ix_districts_province_id"), "districts", ["province_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_districts_province_id"), table_name="districts")
    op.drop_table("districts")
    op.drop_index(op.f("ix_provinces_ar_name"), table_name="provinces")
    op.drop_index(op.f("ix_provinces_eng_name"), table_name="provinces")
    op.drop_index(op.f("ix_provinces_country_id"), table_name="provinces")
    op.drop_table("provinces")
    op.drop_index(op.f("ix_countries_currency_id"), table_name="countries")
    op.drop_index(op.f("ix_countries_ar_name"), table_name="countries")
    op.drop_index(op.f("ix_countries_eng_name"), table_name="countries")
    op.drop_table("countries")
