"""
base.py — Shared Base for In-Memory Records

Records are pydantic models with snake_case attributes that serialize to the
camelCase field names clients see on the wire (`inStock`, `createdAt`, ...).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
