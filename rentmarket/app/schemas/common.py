"""Response envelope shared by every route."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")

# Accepts snake_case attributes or camelCase keys, serializes camelCase.
camel_output = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    message: str
    data: Optional[DataT] = None
