"""Initial schema — hosts, remotes, modules, tags and their join tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # ── hosts ────────────────────────────────
    op.create_table(
        "hosts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(256), nullable=False, index=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("url", sa.String(1024), nullable=True),
        sa.Column("key", sa.String(256), nullable=True),
        sa.Column("environment", sa.String(128), nullable=True, index=True),
        sa.Column("repository", sa.String(1024), nullable=True),
        sa.Column("contact_name", sa.String(256), nullable=True),
        sa.Column("contact_email", sa.String(256), nullable=True),
        sa.Column("documentation_url", sa.String(1024), nullable=True),
        *_timestamps(),
    )

    # ── remotes ──────────────────────────────
    op.create_table(
        "remotes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(256), nullable=False, index=True),
        sa.Column("storage_type", sa.String(64), nullable=False, server_default=""),
        sa.Column("configuration", sa.Text, nullable=False, server_default=""),
        sa.Column("scope", sa.String(256), nullable=True),
        sa.Column("url", sa.String(1024), nullable=True),
        sa.Column("active_version", sa.String(128), nullable=True),
        sa.Column("repository", sa.String(1024), nullable=True),
        sa.Column("contact_name", sa.String(256), nullable=True),
        sa.Column("contact_email", sa.String(256), nullable=True),
        sa.Column("documentation_url", sa.String(1024), nullable=True),
        *_timestamps(),
    )

    # ── remote_modules ───────────────────────
    op.create_table(
        "remote_modules",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("remote_id", sa.Integer, sa.ForeignKey("remotes.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("name", sa.String(256), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("remote_id", "name", name="uq_remote_modules_remote_name"),
    )

    # ── tags ─────────────────────────────────
    op.create_table(
        "tags",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("text", sa.String(128), unique=True, nullable=False, index=True),
        *_timestamps(),
    )

    # ── join tables ──────────────────────────
    op.create_table(
        "hosts_remotes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("host_id", sa.Integer, sa.ForeignKey("hosts.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("remote_id", sa.Integer, sa.ForeignKey("remotes.id", ondelete="CASCADE"), nullable=False, index=True),
        *_timestamps(),
        sa.UniqueConstraint("host_id", "remote_id", name="uq_hosts_remotes_pair"),
    )
    op.create_table(
        "tags_remotes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("remote_id", sa.Integer, sa.ForeignKey("remotes.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("tag_id", sa.Integer, sa.ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True),
        *_timestamps(),
        sa.UniqueConstraint("remote_id", "tag_id", name="uq_tags_remotes_pair"),
    )
    op.create_table(
        "hosts_tags",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("host_id", sa.Integer, sa.ForeignKey("hosts.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("tag_id", sa.Integer, sa.ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("key", sa.String(64), nullable=False, server_default="tag"),
        *_timestamps(),
        sa.UniqueConstraint("host_id", "key", "tag_id", name="uq_hosts_tags_entry"),
    )
    op.create_table(
        "remotes_sub_remotes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("remote_id", sa.Integer, sa.ForeignKey("remotes.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("sub_remote_id", sa.Integer, sa.ForeignKey("remotes.id", ondelete="CASCADE"), nullable=False, index=True),
        *_timestamps(),
        sa.UniqueConstraint("remote_id", "sub_remote_id", name="uq_remotes_sub_remotes_pair"),
        sa.CheckConstraint("remote_id <> sub_remote_id", name="ck_remotes_sub_remotes_not_self"),
    )


def downgrade() -> None:
    op.drop_table("remotes_sub_remotes")
    op.drop_table("hosts_tags")
    op.drop_table("tags_remotes")
    op.drop_table("hosts_remotes")
    op.drop_table("tags")
    op.drop_table("remote_modules")
    op.drop_table("remotes")
    op.drop_table("hosts")
