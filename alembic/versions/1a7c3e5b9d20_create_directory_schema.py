"""create_directory_schema

Revision ID: 1a7c3e5b9d20
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "1a7c3e5b9d20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*names: str) -> list[sa.Column]:
    return [
        sa.Column(
            name,
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        )
        for name in names
    ]


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("is_banned", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps("created_at", "updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_profiles_email"), "profiles", ["email"], unique=False)
    op.create_index(op.f("ix_profiles_role"), "profiles", ["role"], unique=False)
    op.create_index(op.f("ix_profiles_created_at"), "profiles", ["created_at"], unique=False)

    op.create_table(
        "categories",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("icon", sa.String(length=100), nullable=True),
        sa.Column("bg_color", sa.String(length=50), nullable=True),
        *_timestamps("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "subcategories",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category_id", sa.String(length=36), nullable=False),
        *_timestamps("created_at"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_subcategories_name"), "subcategories", ["name"], unique=False)
    op.create_index(op.f("ix_subcategories_category_id"), "subcategories", ["category_id"], unique=False)

    op.create_table(
        "businesses",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("business_name", sa.String(length=200), nullable=False),
        sa.Column("business_owner_id", sa.String(length=36), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("website", sa.String(length=500), nullable=True),
        sa.Column("is_banned", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps("created_at", "updated_at"),
        sa.ForeignKeyConstraint(["business_owner_id"], ["profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_businesses_business_name"), "businesses", ["business_name"], unique=False)
    op.create_index(op.f("ix_businesses_business_owner_id"), "businesses", ["business_owner_id"], unique=False)
    op.create_index(op.f("ix_businesses_is_banned"), "businesses", ["is_banned"], unique=False)

    op.create_table(
        "business_images",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("business_id", sa.String(length=36), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps("created_at"),
        sa.ForeignKeyConstraint(["business_id"], ["businesses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_business_images_business_id"), "business_images", ["business_id"], unique=False)

    op.create_table(
        "business_categories",
        sa.Column("business_id", sa.String(length=36), nullable=False),
        sa.Column("category_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(["business_id"], ["businesses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("business_id", "category_id"),
    )
    op.create_index(
        op.f("ix_business_categories_category_id"), "business_categories", ["category_id"], unique=False
    )

    op.create_table(
        "business_subcategories",
        sa.Column("business_id", sa.String(length=36), nullable=False),
        sa.Column("subcategory_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(["business_id"], ["businesses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["subcategory_id"], ["subcategories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("business_id", "subcategory_id"),
    )
    op.create_index(
        op.f("ix_business_subcategories_subcategory_id"),
        "business_subcategories",
        ["subcategory_id"],
        unique=False,
    )

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("reviewee_id", sa.String(length=36), nullable=False),
        sa.Column("reviewer_id", sa.String(length=36), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps("created_at", "updated_at"),
        sa.ForeignKeyConstraint(["reviewee_id"], ["businesses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewer_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_reviews_reviewee_id"), "reviews", ["reviewee_id"], unique=False)
    op.create_index(op.f("ix_reviews_reviewer_id"), "reviews", ["reviewer_id"], unique=False)
    op.create_index(op.f("ix_reviews_created_at"), "reviews", ["created_at"], unique=False)

    op.create_table(
        "featured_subcategories",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("subcategory_id", sa.String(length=36), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps("created_at"),
        sa.ForeignKeyConstraint(["subcategory_id"], ["subcategories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_featured_subcategories_subcategory_id"),
        "featured_subcategories",
        ["subcategory_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table("featured_subcategories")
    op.drop_table("reviews")
    op.drop_table("business_subcategories")
    op.drop_table("business_categories")
    op.drop_table("business_images")
    op.drop_table("businesses")
    op.drop_table("subcategories")
    op.drop_table("categories")
    op.drop_table("profiles")
