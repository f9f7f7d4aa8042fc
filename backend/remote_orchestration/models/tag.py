"""Tag ORM model and its join rows to remotes and hosts."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from remote_orchestration.database import Base
from remote_orchestration.models._mixins import TimestampMixin


class Tag(TimestampMixin, Base):
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(String(128), unique=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Tag {self.id} text={self.text!r}>"


class TagRemote(TimestampMixin, Base):
    __tablename__ = "tags_remotes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    remote_id: Mapped[int] = mapped_column(
        ForeignKey("remotes.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    tag_id: Mapped[int] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    tag: Mapped[Tag] = relationship("Tag", lazy="selectin")

    __table_args__ = (UniqueConstraint("remote_id", "tag_id", name="uq_tags_remotes_pair"),)

    def __repr__(self) -> str:
        return f"<TagRemote remote_id={self.remote_id} tag_id={self.tag_id}>"


class HostTag(TimestampMixin, Base):
    """Key/value label on a host; the value is a shared :class:`Tag`."""

    __tablename__ = "hosts_tags"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    host_id: Mapped[int] = mapped_column(
        ForeignKey("hosts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    tag_id: Mapped[int] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    key: Mapped[str] = mapped_column(String(64), nullable=False, default="tag")

    tag: Mapped[Tag] = relationship("Tag", lazy="selectin")

    __table_args__ = (UniqueConstraint("host_id", "key", "tag_id", name="uq_hosts_tags_entry"),)

    def __repr__(self) -> str:
        return f"<HostTag host_id={self.host_id} {self.key}={self.tag_id}>"
