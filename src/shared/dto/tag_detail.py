from pydantic import BaseModel, ConfigDict


class TagDetail(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    usage_count: int
