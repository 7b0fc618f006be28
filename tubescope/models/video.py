from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

VIDEO_ID_PATTERN = r"^[A-Za-z0-9_-]{11}$"


class Video(BaseModel):
    model_config = ConfigDict(frozen=True)

    video_id: str = Field(pattern=VIDEO_ID_PATTERN)
    views: int = 0
    hidden_view_count: bool = False
    badge: str | None = None
    length_seconds: int | None = None
    # Derived from text like "3 weeks ago"; approximate.
    approx_published_time: datetime | None = None


class VideoPage(BaseModel):
    videos: list[Video] = []
    continuation: str | None = None


class WatchNext(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    video_id: str
