"""Remote and RemoteModule ORM models — federated module units."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from remote_orchestration.database import Base
from remote_orchestration.models._mixins import TimestampMixin


class Remote(TimestampMixin, Base):
    __tablename__ = "remotes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    storage_type: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    configuration: Mapped[str] = mapped_column(Text, nullable=False, default="")
    scope: Mapped[str | None] = mapped_column(String(256), nullable=True)
    url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Points at the version currently served; null until one is published
    active_version: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Ownership metadata
    repository: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    contact_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    documentation_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Relationships
    modules: Mapped[list["RemoteModule"]] = relationship(
        "RemoteModule", back_populates="remote", cascade="all, delete-orphan",
        lazy="selectin", order_by="RemoteModule.name",
    )
    tag_links: Mapped[list["TagRemote"]] = relationship(  # noqa: F821
        "TagRemote", cascade="all, delete-orphan", lazy="selectin", order_by="TagRemote.id",
    )

    def __repr__(self) -> str:
        return f"<Remote {self.id} name={self.name} scope={self.scope}>"


class RemoteModule(TimestampMixin, Base):
    __tablename__ = "remote_modules"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    remote_id: Mapped[int] = mapped_column(
        ForeignKey("remotes.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)

    remote: Mapped[Remote] = relationship("Remote", back_populates="modules")

    __table_args__ = (UniqueConstraint("remote_id", "name", name="uq_remote_modules_remote_name"),)

    def __repr__(self) -> str:
        return f"<RemoteModule {self.name} remote_id={self.remote_id}>"
