from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    id: int
    kind: str
    text: str

    model_config = ConfigDict(from_attributes=True)
