"""Pydantic data models for repositories and the mentions that discover them.

A Mention records that some provider pointed at a repository endpoint. A
Repository groups the endpoints that resolve to the same project and tracks
whether it has been fetched.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ========== Enums ==========


class FetchStatus(str, Enum):
    """Fetch lifecycle of a repository."""

    NOT_FOUND = "not_found"
    PENDING = "pending"
    FETCHING = "fetching"
    FETCHED = "fetched"


class VCS(str, Enum):
    """Version control systems a mention can refer to."""

    GIT = "git"


# ========== Entities ==========


class Repository(BaseModel):
    """Repository entity stored in the ``repositories`` table."""

    id: UUID = Field(default_factory=uuid4, description="Repository UUID (primary key)")
    endpoints: list[str] = Field(
        ..., min_length=1, description="Clone URLs that resolve to this repository"
    )
    fetch_status: FetchStatus = Field(default=FetchStatus.PENDING)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    fetched_at: datetime | None = None
    fetch_error_at: datetime | None = None
    last_commit_at: datetime | None = None

    @field_validator("endpoints")
    @classmethod
    def validate_endpoints(cls, v: list[str]) -> list[str]:
        """Strip whitespace, reject blanks and drop duplicates keeping order."""
        seen: list[str] = []
        for raw in v:
            endpoint = raw.strip()
            if not endpoint:
                raise ValueError("endpoints must not contain empty values")
            if endpoint not in seen:
                seen.append(endpoint)
        return seen


class Mention(BaseModel):
    """Mention entity stored in the ``mentions`` table."""

    id: UUID = Field(default_factory=uuid4, description="Mention UUID (primary key)")
    endpoint: str = Field(..., min_length=1, max_length=2048, description="Mentioned clone URL")
    provider: str = Field(..., min_length=1, max_length=128, description="Who reported it")
    vcs: VCS = Field(default=VCS.GIT)
    context: dict[str, str] = Field(default_factory=dict, description="Provider metadata")
    created_at: datetime = Field(default_factory=_utcnow)


__all__ = ["VCS", "FetchStatus", "Mention", "Repository"]
