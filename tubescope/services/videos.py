"""Upload listings: a channel tab, its popular uploads, and continuation pages."""

import logging
import re
from datetime import datetime

from tubescope.exceptions import InvalidInputError
from tubescope.models.video import VIDEO_ID_PATTERN, Video, VideoPage
from tubescope.operations import POPULAR_ROUTING_TOKEN, ChannelTab, Operation
from tubescope.parsing import parse_length_text, parse_relative_time, parse_view_count
from tubescope.schema import synthesize_continuation
from tubescope.services.base import InnertubeRequest, user_id_from_channel_id
from tubescope.tree import dig, text, walk

logger = logging.getLogger(__name__)

BLACKLISTED_BADGE_LABELS = frozenset({"360°", "VR180", "Fundraiser"})

_VIDEO_ID = re.compile(VIDEO_ID_PATTERN)


def extract_badge(renderer: dict) -> str | None:
    for label in walk(renderer, "badges", "metadataBadgeRenderer", "label"):
        if isinstance(label, str) and label and label not in BLACKLISTED_BADGE_LABELS:
            return label
    return None


def extract_video(renderer: dict, now: datetime | None = None) -> Video | None:
    """Build a Video from a videoRenderer node. Upcoming and malformed entries yield None."""
    if renderer.get("upcomingEventData") is not None:
        return None
    video_id = renderer.get("videoId")
    if not isinstance(video_id, str) or not _VIDEO_ID.match(video_id):
        if video_id:
            logger.debug("Skipping malformed video id %r", video_id)
        return None

    views, hidden = parse_view_count(text(renderer, "viewCountText"))
    length = text(renderer, "lengthText")
    published = text(renderer, "publishedTimeText")
    return Video(
        video_id=video_id,
        views=views,
        hidden_view_count=hidden,
        badge=extract_badge(renderer),
        length_seconds=parse_length_text(length) if length else None,
        approx_published_time=parse_relative_time(published, now) if published else None,
    )


def extract_page(entries, now: datetime | None = None) -> VideoPage:
    """Collect videos and the trailing continuation token from a list of grid entries."""
    videos = []
    continuation = None
    for entry in entries:
        renderer = dig(entry, "richItemRenderer", "content", "videoRenderer")
        if isinstance(renderer, dict):
            video = extract_video(renderer, now)
            if video is not None:
                videos.append(video)
        token = dig(entry, "continuationItemRenderer", "continuationEndpoint", "continuationCommand", "token")
        if isinstance(token, str) and token:
            continuation = token
    return VideoPage(videos=videos, continuation=continuation)


class GetVideosRequest(InnertubeRequest):
    operation = Operation.VIDEOS

    def __init__(self, client, channel_id: str, tab: ChannelTab = ChannelTab.VIDEOS):
        super().__init__(client)
        user_id_from_channel_id(channel_id)
        self.channel_id = channel_id
        self.tab = ChannelTab(tab)

    def payload(self) -> dict:
        return {"browseId": self.channel_id, "params": self.tab.params}

    def parse(self, tree: dict) -> VideoPage:
        # Deleted, hidden and terminated channels have no tab contents at all.
        entries = walk(
            tree, "contents", "twoColumnBrowseResultsRenderer", "tabs", "tabRenderer",
            "content", "richGridRenderer", "contents",
        )
        return extract_page(entries)


class GetPopularVideosRequest(InnertubeRequest):
    operation = Operation.POPULAR_VIDEOS

    def __init__(self, client, channel_id: str):
        super().__init__(client)
        user_id_from_channel_id(channel_id)
        self.channel_id = channel_id

    def payload(self) -> dict:
        return {"continuation": synthesize_continuation(self.channel_id, POPULAR_ROUTING_TOKEN)}

    def parse(self, tree: dict) -> VideoPage:
        entries = walk(tree, "onResponseReceivedActions", "reloadContinuationItemsCommand", "continuationItems")
        return extract_page(entries)


class GetVideosContinuationRequest(InnertubeRequest):
    operation = Operation.VIDEOS_CONTINUATION

    def __init__(self, client, continuation: str):
        super().__init__(client)
        if not continuation:
            raise InvalidInputError("continuation token must not be empty")
        self.continuation = continuation

    def payload(self) -> dict:
        return {"continuation": self.continuation}

    def parse(self, tree: dict) -> VideoPage:
        entries = walk(tree, "onResponseReceivedActions", "appendContinuationItemsAction", "continuationItems")
        return extract_page(entries)
