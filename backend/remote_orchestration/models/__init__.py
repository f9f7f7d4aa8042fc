"""ORM Models package — import all models so Alembic can discover them."""

from remote_orchestration.models.host import Host                            # noqa: F401
from remote_orchestration.models.remote import Remote, RemoteModule          # noqa: F401
from remote_orchestration.models.tag import HostTag, Tag, TagRemote          # noqa: F401
from remote_orchestration.models.association import HostRemote, RemoteSubRemote  # noqa: F401

__all__ = ["Host", "Remote", "RemoteModule", "Tag", "TagRemote", "HostTag", "HostRemote", "RemoteSubRemote"]
