"""
Shared Pydantic schemas used across multiple domains.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema whose fields travel as camelCase JSON keys.

    Python code keeps snake_case names; both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )
