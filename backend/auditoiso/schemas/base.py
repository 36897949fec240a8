"""
Shared pydantic base for camelCase wire/storage models.
"""
from typing import Union

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

# JSON numbers keep their int-ness (weights of 3 stay 3, not 3.0)
Number = Union[int, float]


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire and on disk."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_record(self) -> dict:
        """Serialize for JSON storage / responses."""
        return self.model_dump(by_alias=True, mode="json")
