from fastapi import APIRouter, Depends

from tubescope.client import InnertubeClient, get_client
from tubescope.models.navigation import ResolvedUrl
from tubescope.models.video import VideoPage, WatchNext

router = APIRouter(prefix="/api", tags=["videos"])


@router.get("/videos/continuation")
async def continue_videos(token: str, client: InnertubeClient = Depends(get_client)) -> VideoPage:
    return await client.get_videos_continued(token).send()


@router.get("/videos/{video_id}/next")
async def watch_next(video_id: str, client: InnertubeClient = Depends(get_client)) -> list[WatchNext]:
    return await client.get_watch_next(video_id).send()


@router.get("/resolve")
async def resolve_url(url: str, client: InnertubeClient = Depends(get_client)) -> ResolvedUrl | None:
    return await client.resolve_url(url).send()
