"""Creator-studio operations: channel lookups, creator search, and comment-author hiding.

Everything here runs on behalf of a signed-in creator and needs credentials
attached with `with_authorization()` / `with_cookie()`.
"""

from datetime import datetime, timezone

from tubescope.models.channel import Channel
from tubescope.models.creator import HiddenUser
from tubescope.operations import Operation
from tubescope.parsing import strip_asset_url
from tubescope.schema import encode_hide_user_action
from tubescope.services.base import CHANNEL_ID_PREFIX, InnertubeRequest, user_id_from_channel_id
from tubescope.tree import as_int, dig, items

AVATAR_CDN = ".ggpht.com/"
# Default avatars are served from yt*.ggpht.com.
DEFAULT_AVATAR_PREFIX = "https://yt"

# Restricts creator search to channel entities.
CHANNEL_RESULT_TYPE = 10


def creator_avatar(url: str | None) -> str | None:
    if not url or url.startswith(DEFAULT_AVATAR_PREFIX):
        return None
    return strip_asset_url(url, AVATAR_CDN)


def parse_creator_channel(node: dict) -> Channel | None:
    channel_id = node.get("channelId")
    if not channel_id:
        return None
    user_id = channel_id[len(CHANNEL_ID_PREFIX):] if channel_id.startswith(CHANNEL_ID_PREFIX) else channel_id

    channel = Channel(user_id=user_id, display_name=node.get("title") or "")
    handle = node.get("channelHandle")
    if handle:
        channel.handle = handle.removeprefix("@")
    channel.verified = bool(node.get("isNameVerified", False))
    channel.profile_picture = creator_avatar(dig(node, "thumbnailDetails", "thumbnails", 0, "url"))

    metric = node.get("metric")
    if metric is not None:
        channel.subscribers = as_int(metric.get("subscriberCount")) or 0
        channel.views = as_int(metric.get("totalVideoViewCount")) or 0
        channel.videos = as_int(metric.get("videoCount")) or 0

    created = as_int(node.get("timeCreatedSeconds"))
    if created:
        channel.created_at = datetime.fromtimestamp(created, tz=timezone.utc)
    return channel


class GetCreatorChannelsRequest(InnertubeRequest):
    operation = Operation.CREATOR_CHANNELS

    def __init__(self, client, channel_ids: list[str]):
        super().__init__(client)
        self.channel_ids = list(channel_ids)

    def payload(self) -> dict:
        return {
            "channelIds": self.channel_ids,
            "mask": {
                "channelId": True,
                "title": True,
                "thumbnailDetails": {"all": True},
                "metric": {"all": True},
                "timeCreatedSeconds": True,
                "isNameVerified": True,
                "channelHandle": True,
            },
        }

    def parse(self, tree: dict) -> list[Channel]:
        channels = (parse_creator_channel(node) for node in items(tree, "channels") if isinstance(node, dict))
        return [channel for channel in channels if channel is not None]


class GetHiddenUsersRequest(InnertubeRequest):
    """Comment authors the given channel has hidden."""

    operation = Operation.HIDDEN_USERS

    def __init__(self, client, channel_id: str):
        super().__init__(client)
        self.channel_id = channel_id

    def payload(self) -> dict:
        return {
            "channelIds": [self.channel_id],
            "mask": {"commentsSettings": {"hiddenUsers": {"all": True}}},
        }

    def parse(self, tree: dict) -> list[HiddenUser]:
        hidden = []
        for user in items(tree, "channels", 0, "commentsSettings", "hiddenUsers"):
            if not isinstance(user, dict):
                continue
            hidden.append(HiddenUser(
                display_name=user.get("displayName") or "",
                channel_id=user.get("externalChannelId") or "",
                avatar_url=creator_avatar(dig(user, "avatarThumbnail", "thumbnails", 0, "url")),
            ))
        return hidden


class SearchPublicCreatorEntitiesRequest(InnertubeRequest):
    """Search channels by name. Returns user ids (channel ids without the prefix)."""

    operation = Operation.SEARCH_CREATORS

    def __init__(self, client, query: str):
        super().__init__(client)
        self.query = query

    def payload(self) -> dict:
        return {"query": self.query, "filter": {"restrictResultType": CHANNEL_RESULT_TYPE}}

    def parse(self, tree: dict) -> list[str]:
        ids = (dig(channel, "channelId") for channel in items(tree, "channels"))
        return [channel_id[len(CHANNEL_ID_PREFIX):] for channel_id in ids if isinstance(channel_id, str) and channel_id]


class UpdateHideUserStatusRequest(InnertubeRequest):
    """Hide or unhide a user's comments on the signed-in creator's channel."""

    operation = Operation.HIDE_USER

    def __init__(self, client, channel_id: str, hide: bool):
        super().__init__(client)
        self.user_id = user_id_from_channel_id(channel_id)
        self.hide = hide

    def payload(self) -> dict:
        return {"action": encode_hide_user_action(self.user_id, self.hide)}

    def decode(self, schema, body: bytes) -> dict:
        # The flag endpoint's body carries nothing we read.
        return {}

    def parse(self, tree: dict) -> None:
        return None
