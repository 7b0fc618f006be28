from pydantic import BaseModel


class HiddenUser(BaseModel):
    display_name: str = ""
    channel_id: str = ""
    avatar_url: str | None = None
