from typing import Literal

from pydantic import BaseModel


class ResolvedUrl(BaseModel):
    browse_endpoint: str | None = None
    url_endpoint: str | None = None


class ConditionalRedirect(BaseModel):
    kind: Literal["channel", "blocked"]
    channel_id: str | None = None


class CountryCode(BaseModel):
    country_code: str
