"""Shared base for stored records"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StoredModel(BaseModel):
    """Record persisted as camelCase JSON, addressed as snake_case in Python"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_record(self) -> dict:
        """JSON-serializable dict using the stored field names."""
        return self.model_dump(mode="json", by_alias=True)
