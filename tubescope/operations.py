"""Per-operation request profiles.

Every operation is pinned to a client identity (which front-end the request
presents itself as), an endpoint path, and the field mask that projects the
response down to what its extractor reads. Upstream version bumps happen here.
"""

from dataclasses import dataclass
from enum import Enum

API_HOST = "youtubei.googleapis.com"
WEB_HOST = "www.youtube.com"
STUDIO_HOST = "studio.youtube.com"


@dataclass(frozen=True)
class ClientIdentity:
    name: int
    version: str

    def context(self) -> dict:
        return {"client": {"clientName": self.name, "clientVersion": self.version}}


WEB = ClientIdentity(1, "2.20240614.01.00")
TV = ClientIdentity(7, "7.20250126.17.00")
CREATOR = ClientIdentity(62, "1.20250527.06.00")
CREATOR_SETTINGS = ClientIdentity(62, "1.20250731.01.00")


class Operation(str, Enum):
    CHANNEL = "channel"
    CHANNEL_ABOUT = "channel_about"
    VIDEOS = "videos"
    POPULAR_VIDEOS = "popular_videos"
    VIDEOS_CONTINUATION = "videos_continuation"
    RESOLVE_URL = "resolve_url"
    WATCH_NEXT = "watch_next"
    PUBLIC_SUBSCRIPTIONS = "public_subscriptions"
    CREATOR_CHANNELS = "creator_channels"
    HIDDEN_USERS = "hidden_users"
    SEARCH_CREATORS = "search_creators"
    HIDE_USER = "hide_user"
    CONDITIONAL_REDIRECT = "conditional_redirect"
    DETECT_COUNTRY = "detect_country"


@dataclass(frozen=True)
class OperationProfile:
    path: str
    identity: ClientIdentity
    request_message: str
    response_message: str
    field_mask: str | None = None
    host: str = API_HOST
    origin: str | None = None
    requires_authorization: bool = False
    requires_cookie: bool = False
    # Body arrives base64-encoded and must be decoded before the schema sees it.
    base64_response: bool = False
    # 404 means "nothing there" rather than an error.
    not_found_is_empty: bool = False
    # Endpoint only speaks JSON, whatever schema the client was built with.
    json_only: bool = False
    extra_headers: tuple[tuple[str, str], ...] = ()


CHANNEL_MASK = (
    "contents.twoColumnBrowseResultsRenderer.tabs.tabRenderer.title,"
    "header.pageHeaderRenderer.content.pageHeaderViewModel("
    "title.dynamicTextViewModel.text.attachmentRuns.element.type.imageType.image.sources.clientResource.imageName,"
    "banner.imageBannerViewModel.image.sources.url),"
    "metadata.channelMetadataRenderer(title,description,avatar.thumbnails.url,facebookProfileId),"
    "microformat.microformatDataRenderer(noindex,unlisted,familySafe,tags,availableCountries),"
    "alerts.alertRenderer.text.simpleText,"
    "header(carouselHeaderRenderer.contents.carouselItemRenderer.carouselItems.defaultPromoPanelRenderer.title.runs.text,"
    "pageHeaderRenderer)"
)

CHANNEL_ABOUT_MASK = (
    "onResponseReceivedEndpoints.appendContinuationItemsAction.continuationItems.aboutChannelRenderer.metadata."
    "aboutChannelViewModel(country,subscriberCountText,viewCountText,joinedDateText.content,canonicalChannelUrl,"
    "videoCountText,signInForBusinessEmail.content,links.channelExternalLinkViewModel(title.content,link.content))"
)

_VIDEO_FIELDS = (
    "videoRenderer(videoId,viewCountText.simpleText,lengthText.simpleText,"
    "publishedTimeText.simpleText,badges,upcomingEventData)"
)
_CONTINUATION_FIELDS = "continuationItemRenderer.continuationEndpoint.continuationCommand.token"

VIDEOS_MASK = (
    "contents.twoColumnBrowseResultsRenderer.tabs.tabRenderer.content.richGridRenderer.contents("
    f"richItemRenderer.content.{_VIDEO_FIELDS},{_CONTINUATION_FIELDS})"
)

POPULAR_VIDEOS_MASK = (
    "onResponseReceivedActions.reloadContinuationItemsCommand.continuationItems("
    f"richItemRenderer.content.{_VIDEO_FIELDS},{_CONTINUATION_FIELDS})"
)

VIDEOS_CONTINUATION_MASK = (
    "onResponseReceivedActions.appendContinuationItemsAction.continuationItems("
    f"richItemRenderer.content.{_VIDEO_FIELDS},{_CONTINUATION_FIELDS})"
)

WATCH_NEXT_MASK = (
    "contents.twoColumnWatchNextResults(secondaryResults.secondaryResults.results("
    "compactVideoRenderer(videoId,shortBylineText.runs(navigationEndpoint.browseEndpoint.browseId))))"
)

PUBLIC_SUBSCRIPTIONS_MASK = (
    "contents.tvBrowseRenderer.content.tvSurfaceContentRenderer.content.sectionListRenderer.contents."
    "shelfRenderer.headerRenderer.shelfHeaderRenderer.avatarLockup.avatarLockupRenderer.title.simpleText"
)

CREATOR_CHANNELS_MASK = (
    "channels(channelId,title,thumbnailDetails.thumbnails.url,metric,timeCreatedSeconds,"
    "contentOwnerAssociation,isNameVerified,channelHandle)"
)

# Opaque routing tokens embedded in locally synthesized continuations.
ABOUT_ROUTING_TOKEN = "8gYrGimaASYKJDY3M2UzYjY0LTAwMDAtMjRmMy04ZjMyLTU4MjQyOWM2ODNjOA%3D%3D"
POPULAR_ROUTING_TOKEN = "8gYuGix6KhImCiQ2N2Y1N2IwZi0wMDAwLTJjNjctODA4OC0zYzI4NmQzZTJkYjIgAg%3D%3D"

WHAT_TO_WATCH_BROWSE_ID = "FEwhat_to_watch"


class ChannelTab(str, Enum):
    VIDEOS = "videos"
    LIVE = "live"

    @property
    def params(self) -> str:
        return _TAB_PARAMS[self]


_TAB_PARAMS = {
    ChannelTab.VIDEOS: "EgZ2aWRlb3PyBgQKAjoA",
    ChannelTab.LIVE: "EgdzdHJlYW1z8gYECgJ6AA==",
}


PROFILES: dict[Operation, OperationProfile] = {
    Operation.CHANNEL: OperationProfile(
        path="/youtubei/v1/browse",
        identity=WEB,
        request_message="BrowseRequest",
        response_message="BrowseResponse",
        field_mask=CHANNEL_MASK,
    ),
    Operation.CHANNEL_ABOUT: OperationProfile(
        path="/youtubei/v1/browse",
        identity=WEB,
        request_message="BrowseRequest",
        response_message="BrowseResponse",
        field_mask=CHANNEL_ABOUT_MASK,
    ),
    Operation.VIDEOS: OperationProfile(
        path="/youtubei/v1/browse",
        identity=WEB,
        request_message="BrowseRequest",
        response_message="BrowseResponse",
        field_mask=VIDEOS_MASK,
    ),
    Operation.POPULAR_VIDEOS: OperationProfile(
        path="/youtubei/v1/browse",
        identity=WEB,
        request_message="BrowseRequest",
        response_message="BrowseResponse",
        field_mask=POPULAR_VIDEOS_MASK,
    ),
    Operation.VIDEOS_CONTINUATION: OperationProfile(
        path="/youtubei/v1/browse",
        identity=WEB,
        request_message="BrowseRequest",
        response_message="BrowseResponse",
        field_mask=VIDEOS_CONTINUATION_MASK,
    ),
    Operation.RESOLVE_URL: OperationProfile(
        path="/youtubei/v1/navigation/resolve_url",
        identity=WEB,
        request_message="ResolveUrlRequest",
        response_message="ResolveUrlResponse",
        field_mask="endpoint.browseEndpoint.browseId,endpoint.urlEndpoint.url",
        not_found_is_empty=True,
    ),
    Operation.WATCH_NEXT: OperationProfile(
        path="/youtubei/v1/next",
        identity=WEB,
        request_message="NextRequest",
        response_message="NextResponse",
        field_mask=WATCH_NEXT_MASK,
    ),
    Operation.PUBLIC_SUBSCRIPTIONS: OperationProfile(
        path="/youtubei/v1/browse",
        identity=TV,
        request_message="BrowseRequest",
        response_message="BrowseResponse",
        field_mask=PUBLIC_SUBSCRIPTIONS_MASK,
    ),
    Operation.CREATOR_CHANNELS: OperationProfile(
        path="/youtubei/v1/creator/get_creator_channels",
        identity=WEB,
        request_message="GetCreatorChannelsRequest",
        response_message="GetCreatorChannelsResponse",
        field_mask=CREATOR_CHANNELS_MASK,
        requires_authorization=True,
        base64_response=True,
        extra_headers=(("X-Goog-Encode-Response-If-Executable", "base64"),),
    ),
    Operation.HIDDEN_USERS: OperationProfile(
        path="/youtubei/v1/creator/get_creator_channels?alt=json",
        identity=CREATOR_SETTINGS,
        request_message="GetCreatorChannelsRequest",
        response_message="GetCreatorChannelsResponse",
        field_mask="channels.commentsSettings.hiddenUsers",
        host=STUDIO_HOST,
        origin=f"https://{STUDIO_HOST}",
        json_only=True,
    ),
    Operation.SEARCH_CREATORS: OperationProfile(
        path="/youtubei/v1/creator/search_public_creator_entities?alt=json",
        identity=CREATOR,
        request_message="SearchPublicCreatorEntitiesRequest",
        response_message="SearchPublicCreatorEntitiesResponse",
        field_mask="channels(channelId)",
        host=STUDIO_HOST,
        origin=f"https://{STUDIO_HOST}",
        json_only=True,
    ),
    Operation.HIDE_USER: OperationProfile(
        path="/youtubei/v1/flag/flag",
        identity=WEB,
        request_message="FlagRequest",
        response_message="FlagResponse",
        host=WEB_HOST,
        origin=f"https://{WEB_HOST}",
        requires_authorization=True,
        requires_cookie=True,
        extra_headers=(("X-Goog-Encode-Response-If-Executable", "base64"),),
    ),
    Operation.CONDITIONAL_REDIRECT: OperationProfile(
        path="/youtubei/v1/browse",
        identity=WEB,
        request_message="BrowseRequest",
        response_message="BrowseResponse",
        field_mask="alerts,onResponseReceivedActions.navigateAction.endpoint.browseEndpoint",
    ),
    Operation.DETECT_COUNTRY: OperationProfile(
        path="/youtubei/v1/browse",
        identity=WEB,
        request_message="BrowseRequest",
        response_message="BrowseResponse",
        field_mask="topbar.desktopTopbarRenderer.countryCode",
    ),
}


def profile_for(operation: Operation) -> OperationProfile:
    return PROFILES[operation]
