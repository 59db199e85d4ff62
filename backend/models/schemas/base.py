"""Shared base for the pipeline contracts.

Fields are snake_case in Python; JSON uses camelCase aliases and accepts both.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SchemaModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
