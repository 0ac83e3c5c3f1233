from typing import Annotated, Optional

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _stringify_object_id(value):
    if isinstance(value, ObjectId):
        return str(value)
    return value


# ObjectIds leave the store as plain strings
PyObjectId = Annotated[str, BeforeValidator(_stringify_object_id)]


class MongoBaseModel(BaseModel):
    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
