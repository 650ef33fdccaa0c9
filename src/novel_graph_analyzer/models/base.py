"""Shared base model for the analysis output contract."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AnalysisModel(BaseModel):
    """Snake-case fields in Python, camelCase keys when serialized."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        """Convert to the camelCase dictionary handed to storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
