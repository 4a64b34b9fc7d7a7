"""Data models for the sources module."""

from dataclasses import dataclass


@dataclass
class Source:
    """A row of the ``source`` table.

    ``id`` is None until the record has been persisted; PostgreSQL assigns
    it on insert and it never changes afterwards.
    """

    name: str
    url: str | None = None
    description: str | None = None
    id: int | None = None
