from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class BaseSchema(BaseModel):
    """Wire schema: snake_case in Python, camelCase for the dashboard."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
