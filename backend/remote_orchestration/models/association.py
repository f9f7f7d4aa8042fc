"""Join rows between hosts and remotes, and between remotes and their sub-remotes."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from remote_orchestration.database import Base
from remote_orchestration.models._mixins import TimestampMixin


class HostRemote(TimestampMixin, Base):
    """A remote deployed to / available at a host."""

    __tablename__ = "hosts_remotes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    host_id: Mapped[int] = mapped_column(
        ForeignKey("hosts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    remote_id: Mapped[int] = mapped_column(
        ForeignKey("remotes.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    __table_args__ = (UniqueConstraint("host_id", "remote_id", name="uq_hosts_remotes_pair"),)

    def __repr__(self) -> str:
        return f"<HostRemote host_id={self.host_id} remote_id={self.remote_id}>"


class RemoteSubRemote(TimestampMixin, Base):
    """A remote consumed by another remote."""

    __tablename__ = "remotes_sub_remotes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    remote_id: Mapped[int] = mapped_column(
        ForeignKey("remotes.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    sub_remote_id: Mapped[int] = mapped_column(
        ForeignKey("remotes.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    __table_args__ = (
        UniqueConstraint("remote_id", "sub_remote_id", name="uq_remotes_sub_remotes_pair"),
        CheckConstraint("remote_id <> sub_remote_id", name="ck_remotes_sub_remotes_not_self"),
    )

    def __repr__(self) -> str:
        return f"<RemoteSubRemote remote_id={self.remote_id} sub_remote_id={self.sub_remote_id}>"
