"""Pydantic schemas for sourced-core."""

from sourced.schemas.models import VCS, FetchStatus, Mention, Repository

__all__ = ["VCS", "FetchStatus", "Mention", "Repository"]
