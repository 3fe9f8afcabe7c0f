"""cms content tables: pages, posts, taxonomies, revisions, settings

Revision ID: 4b2e9c7d1a05
Revises:
Create Date: 2026-10-16 10:12:41.508113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b2e9c7d1a05'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = ("draft", "scheduled", "published", "archived")
JSONDoc = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _status():
    return sa.Enum(*STATUSES, name="content_status", native_enum=False, create_constraint=True)


def _ts(name, nullable=True):
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade():
    # 1) Pages
    op.create_table(
        "pages",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("content_json", JSONDoc, nullable=True),
        sa.Column("template", sa.String(64), nullable=True),
        sa.Column("meta_title", sa.String(255), nullable=True),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("canonical_url", sa.String(512), nullable=True),
        sa.Column("og_image", sa.String(512), nullable=True),
        sa.Column("custom_css", sa.Text(), nullable=True),
        sa.Column("is_home", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_shop", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("status", _status(), nullable=False, server_default="draft"),
        _ts("published_at"),
        _ts("scheduled_at"),
        sa.Column("show_in_nav", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("nav_order", sa.Integer(), nullable=False, server_default="0"),
        _ts("created_at", nullable=False),
        _ts("updated_at", nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_pages"),
        sa.UniqueConstraint("slug", name="uq_pages_slug"),
    )
    # 2) Singleton flags: at most one home / one shop page
    op.create_index(
        "uq_pages_single_home", "pages", ["is_home"], unique=True,
        sqlite_where=sa.text("is_home = 1"), postgresql_where=sa.text("is_home = TRUE"),
    )
    op.create_index(
        "uq_pages_single_shop", "pages", ["is_shop"], unique=True,
        sqlite_where=sa.text("is_shop = 1"), postgresql_where=sa.text("is_shop = TRUE"),
    )
    op.create_index("ix_pages_status_nav_order", "pages", ["status", "nav_order"])

    # 3) Taxonomies
    op.create_table(
        "post_categories",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(160), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _ts("created_at", nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_post_categories"),
        sa.UniqueConstraint("slug", name="uq_post_categories_slug"),
    )
    op.create_table(
        "post_tags",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(160), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        _ts("created_at", nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_post_tags"),
        sa.UniqueConstraint("slug", name="uq_post_tags_slug"),
    )

    # 4) Posts
    op.create_table(
        "posts",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("content_json", JSONDoc, nullable=True),
        sa.Column("legacy_html", sa.Text(), nullable=True),
        sa.Column("status", _status(), nullable=False, server_default="draft"),
        _ts("published_at"),
        _ts("scheduled_at"),
        sa.Column("author_id", sa.String(36), nullable=True),
        sa.Column("cover_image_id", sa.String(36), nullable=True),
        sa.Column("og_image_id", sa.String(36), nullable=True),
        sa.Column("reading_time_minutes", sa.Integer(), nullable=True),
        sa.Column("canonical_url", sa.String(512), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("allow_index", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("allow_follow", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("custom_css", sa.Text(), nullable=True),
        _ts("created_at", nullable=False),
        _ts("updated_at", nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_posts"),
        sa.UniqueConstraint("slug", name="uq_posts_slug"),
    )
    op.create_index("ix_posts_author_id", "posts", ["author_id"])
    op.create_index("ix_posts_status_published_at", "posts", ["status", "published_at"])
    op.create_index("ix_posts_status_scheduled_at", "posts", ["status", "scheduled_at"])

    # 5) Join tables (rows go with either side)
    op.create_table(
        "post_category_map",
        sa.Column("post_id", sa.String(36), nullable=False),
        sa.Column("category_id", sa.String(36), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE",
                                name="fk_post_category_map_post_id_posts"),
        sa.ForeignKeyConstraint(["category_id"], ["post_categories.id"], ondelete="CASCADE",
                                name="fk_post_category_map_category_id_post_categories"),
        sa.PrimaryKeyConstraint("post_id", "category_id", name="pk_post_category_map"),
    )
    op.create_table(
        "post_tag_map",
        sa.Column("post_id", sa.String(36), nullable=False),
        sa.Column("tag_id", sa.String(36), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE",
                                name="fk_post_tag_map_post_id_posts"),
        sa.ForeignKeyConstraint(["tag_id"], ["post_tags.id"], ondelete="CASCADE",
                                name="fk_post_tag_map_tag_id_post_tags"),
        sa.PrimaryKeyConstraint("post_id", "tag_id", name="pk_post_tag_map"),
    )

    # 6) Revisions (append-only)
    op.create_table(
        "post_revisions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("post_id", sa.String(36), nullable=False),
        sa.Column("snapshot_json", JSONDoc, nullable=False),
        sa.Column("created_by_user_id", sa.String(36), nullable=True),
        _ts("created_at", nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE",
                                name="fk_post_revisions_post_id_posts"),
        sa.PrimaryKeyConstraint("id", name="pk_post_revisions"),
    )
    op.create_index("ix_post_revisions_post_id", "post_revisions", ["post_id"])

    # 7) Blog settings (single row, id = 'default')
    op.create_table(
        "post_settings",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("posts_per_page", sa.Integer(), nullable=False, server_default="12"),
        sa.Column("blog_title", sa.String(255), nullable=False, server_default="Blog"),
        sa.Column("blog_description", sa.Text(), nullable=True),
        sa.Column("default_og_image_id", sa.String(36), nullable=True),
        sa.Column("rss_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        _ts("created_at", nullable=False),
        _ts("updated_at", nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_post_settings"),
    )


def downgrade():
    # reverse order
    op.drop_table("post_settings")
    op.drop_index("ix_post_revisions_post_id", table_name="post_revisions")
    op.drop_table("post_revisions")
    op.drop_table("post_tag_map")
    op.drop_table("post_category_map")
    op.drop_index("ix_posts_status_scheduled_at", table_name="posts")
    op.drop_index("ix_posts_status_published_at", table_name="posts")
    op.drop_index("ix_posts_author_id", table_name="posts")
    op.drop_table("posts")
    op.drop_table("post_tags")
    op.drop_table("post_categories")
    op.drop_index("ix_pages_status_nav_order", table_name="pages")
    op.drop_index("uq_pages_single_shop", table_name="pages")
    op.drop_index("uq_pages_single_home", table_name="pages")
    op.drop_table("pages")
