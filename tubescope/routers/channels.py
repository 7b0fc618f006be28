from fastapi import APIRouter, Depends

from tubescope.client import InnertubeClient, get_client
from tubescope.models.channel import Channel
from tubescope.models.video import VideoPage
from tubescope.operations import ChannelTab

router = APIRouter(prefix="/api/channels", tags=["channels"])


@router.get("/{channel_id}")
async def get_channel(channel_id: str, about: bool = True, client: InnertubeClient = Depends(get_client)) -> Channel:
    channel = await client.get_channel(channel_id).send()
    if about and channel.available:
        await client.get_channel_about(channel).send()
    return channel


@router.get("/{channel_id}/videos")
async def list_videos(
    channel_id: str,
    tab: ChannelTab = ChannelTab.VIDEOS,
    client: InnertubeClient = Depends(get_client),
) -> VideoPage:
    return await client.get_videos(channel_id, tab).send()


@router.get("/{channel_id}/popular")
async def list_popular_videos(channel_id: str, client: InnertubeClient = Depends(get_client)) -> VideoPage:
    return await client.get_popular_videos(channel_id).send()


@router.get("/{channel_id}/public-subscriptions")
async def has_public_subscriptions(channel_id: str, client: InnertubeClient = Depends(get_client)) -> dict:
    return {"public_subscriptions": await client.has_public_subscriptions(channel_id).send()}
