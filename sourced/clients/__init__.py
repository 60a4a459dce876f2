"""PostgreSQL-backed stores bound to the shared database handle."""

from sourced.clients.mention_store import MentionStore
from sourced.clients.repository_store import RepositoryStore

__all__ = ["MentionStore", "RepositoryStore"]
