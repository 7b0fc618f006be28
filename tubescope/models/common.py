from pydantic import BaseModel


class EgressStatus(BaseModel):
    target_host: str
    local_address: str | None = None
