"""Host ORM model — a deployment target that serves or consumes remotes."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from remote_orchestration.database import Base
from remote_orchestration.models._mixins import TimestampMixin


class Host(TimestampMixin, Base):
    __tablename__ = "hosts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    key: Mapped[str | None] = mapped_column(String(256), nullable=True)
    environment: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)

    # Ownership metadata
    repository: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    contact_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    documentation_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Relationships
    tag_links: Mapped[list["HostTag"]] = relationship(  # noqa: F821
        "HostTag", cascade="all, delete-orphan", lazy="selectin", order_by="HostTag.id",
    )

    def __repr__(self) -> str:
        return f"<Host {self.id} name={self.name} env={self.environment}>"
