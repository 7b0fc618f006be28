"""Channel profile and about-page extraction."""

from urllib.parse import unquote

from tubescope.countries import blocked_countries, code_for
from tubescope.models.channel import Channel, Link
from tubescope.operations import ABOUT_ROUTING_TOKEN, ChannelTab, Operation
from tubescope.parsing import (
    parse_creation_date,
    parse_multiplied_string,
    parse_numeric_string,
    strip_asset_url,
)
from tubescope.schema import synthesize_continuation
from tubescope.services.base import InnertubeRequest, user_id_from_channel_id
from tubescope.tree import dig, items, text, walk

IMAGE_CDN = ".googleusercontent.com/"

VERIFIED_ICON = "CHECK_CIRCLE_FILLED"
ARTIST_ICON = "MUSIC_FILLED"

HIDDEN_ALERT = "This channel is not available."
DELETED_ALERT = "This channel does not exist."

CANONICAL_URL_PREFIX = "http://www.youtube.com/"


def apply_alert(channel: Channel, alert: str | None) -> None:
    """Set the availability state implied by the channel's alert, if any."""
    if not alert:
        return
    if alert == HIDDEN_ALERT:
        channel.hidden = True
    elif alert == DELETED_ALERT:
        channel.deleted = True
    else:
        channel.terminated = True
        channel.termination_reason = alert


def parse_channel(tree: dict, channel_id: str) -> Channel:
    channel = Channel(user_id=user_id_from_channel_id(channel_id))

    channel.channel_tabs = [
        title
        for title in walk(tree, "contents", "twoColumnBrowseResultsRenderer", "tabs", "tabRenderer", "title")
        if isinstance(title, str)
    ]

    page_header = dig(tree, "header", "pageHeaderRenderer", "content", "pageHeaderViewModel")
    icons = walk(
        page_header, "title", "dynamicTextViewModel", "text", "attachmentRuns",
        "element", "type", "imageType", "image", "sources", "clientResource", "imageName",
    )
    for icon in icons:
        if icon == VERIFIED_ICON:
            channel.verified = True
        elif icon == ARTIST_ICON:
            channel.oac = True

    banner_url = dig(page_header, "banner", "imageBannerViewModel", "image", "sources", 0, "url")
    channel.banner = strip_asset_url(banner_url, IMAGE_CDN)

    if dig(tree, "header", "carouselHeaderRenderer") is not None:
        channel.has_carousel = True

    metadata = dig(tree, "metadata", "channelMetadataRenderer")
    if metadata is not None:
        channel.display_name = dig(metadata, "title") or ""
        channel.description = dig(metadata, "description") or ""
        avatar_url = dig(metadata, "avatar", "thumbnails", "url")
        channel.profile_picture = strip_asset_url(avatar_url, IMAGE_CDN)

    microformat = dig(tree, "microformat", "microformatDataRenderer")
    if microformat is not None:
        channel.no_index = bool(microformat.get("noindex", False))
        channel.unlisted = bool(microformat.get("unlisted", False))
        channel.family_safe = bool(microformat.get("familySafe", False))
        channel.tags = list(dict.fromkeys(items(microformat, "tags")))
        channel.blocked_countries = blocked_countries(items(microformat, "availableCountries"))

    apply_alert(channel, text(tree, "alerts", "alertRenderer", "text"))
    return channel


def apply_channel_about(channel: Channel, tree: dict) -> Channel:
    """Enrich `channel` in place from an about-page response. Never clears a set field."""
    about = None
    for item in walk(tree, "onResponseReceivedEndpoints", "appendContinuationItemsAction", "continuationItems"):
        about = dig(item, "aboutChannelRenderer", "metadata", "aboutChannelViewModel")
        if about is not None:
            break
    if about is None:
        return channel

    subscribers = text(about, "subscriberCountText")
    if subscribers:
        channel.subscribers = parse_multiplied_string(subscribers)

    views = text(about, "viewCountText")
    if views:
        channel.views = parse_numeric_string(views)

    videos = text(about, "videoCountText")
    if videos:
        channel.videos = parse_numeric_string(videos)

    canonical_url = dig(about, "canonicalChannelUrl") or ""
    if canonical_url.startswith(CANONICAL_URL_PREFIX + "@"):
        channel.handle = unquote(canonical_url[len(CANONICAL_URL_PREFIX) + 1:])

    country = dig(about, "country")
    if country:
        channel.country = code_for(country) or channel.country

    if dig(about, "signInForBusinessEmail") is not None:
        channel.has_business_email = True

    links = []
    for link in walk(about, "links", "channelExternalLinkViewModel"):
        name, url = text(link, "title"), text(link, "link")
        if name and url:
            links.append(Link(name=name, url=url))
    if links:
        channel.links = links

    joined = text(about, "joinedDateText") or ""
    if joined.startswith("Joined "):
        created_at = parse_creation_date(joined[len("Joined "):])
        if created_at is not None:
            channel.created_at = created_at

    return channel


class GetChannelRequest(InnertubeRequest):
    operation = Operation.CHANNEL

    def __init__(self, client, channel_id: str):
        super().__init__(client)
        user_id_from_channel_id(channel_id)
        self.channel_id = channel_id

    def payload(self) -> dict:
        return {"browseId": self.channel_id, "params": ChannelTab.VIDEOS.params}

    def parse(self, tree: dict) -> Channel:
        return parse_channel(tree, self.channel_id)


class GetChannelAboutRequest(InnertubeRequest):
    """Fetches the about page and enriches the given channel in place."""

    operation = Operation.CHANNEL_ABOUT

    def __init__(self, client, channel: Channel):
        super().__init__(client)
        self.channel = channel

    def payload(self) -> dict:
        return {"continuation": synthesize_continuation(self.channel.channel_id, ABOUT_ROUTING_TOKEN)}

    def parse(self, tree: dict) -> Channel:
        return apply_channel_about(self.channel, tree)
