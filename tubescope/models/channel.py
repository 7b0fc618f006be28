from datetime import datetime, timezone

from pydantic import BaseModel

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Link(BaseModel):
    name: str
    url: str


class Channel(BaseModel):
    """A channel as seen by the browse endpoint, optionally enriched by its about page.

    At most one of deleted, hidden and terminated is set.
    """

    user_id: str
    handle: str | None = None
    display_name: str = ""
    description: str = ""
    profile_picture: str | None = None
    banner: str | None = None
    verified: bool = False
    oac: bool = False
    subscribers: int | None = None
    views: int | None = None
    videos: int | None = None
    created_at: datetime = EPOCH
    country: str | None = None
    has_business_email: bool = False
    links: list[Link] = []
    tags: list[str] = []
    deleted: bool = False
    hidden: bool = False
    terminated: bool = False
    termination_reason: str = ""
    no_index: bool = False
    unlisted: bool = False
    family_safe: bool = True
    blocked_countries: list[str] = []
    channel_tabs: list[str] = []
    has_carousel: bool = False

    @property
    def channel_id(self) -> str:
        return f"UC{self.user_id}"

    @property
    def available(self) -> bool:
        return not (self.deleted or self.hidden or self.terminated)
