from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    """Request body that accepts camelCase keys as well as snake_case ones."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
