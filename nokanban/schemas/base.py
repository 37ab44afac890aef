from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        arbitrary_types_allowed=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BaseTimestampSchema(BaseSchema):
    created_at: datetime
    updated_at: datetime | None = None
