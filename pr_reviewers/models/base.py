"""Shared Pydantic base and wire-format helpers."""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_timestamp(value: datetime) -> str:
    """Render ``value`` in UTC as ``YYYY-MM-DDTHH:MM:SSZ``."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


class WireModel(BaseModel):
    """Base model for the JSON API.

    Field names are snake_case both in Python and on the wire.  Unknown
    request fields are ignored.
    """

    model_config = ConfigDict(extra="ignore")
