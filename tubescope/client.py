"""Client facade.

Binds a target host and an optional egress subnet, and hands out request
builders that send through the client's current transport:

    async with InnertubeClient(egress_subnet="2001:db8:1234::/48") as client:
        channel = await client.get_channel("UC...").send()
        await client.get_channel_about(channel).send()
        async for page in client.iter_videos(channel.channel_id):
            ...

`rotate()` swaps the transport for one bound to a fresh address. Calls
already in flight finish on the old transport. Callers that need a
rotation to be ordered against their own sends must serialize around it.
"""

import ipaddress
import logging
from functools import lru_cache
from typing import Any

from tubescope.config import DEFAULT_TARGET_HOST, Settings, get_settings
from tubescope.egress import RANGE_ID_BITS, EgressAllocator, random_range_id
from tubescope.exceptions import ConfigurationError
from tubescope.http_client import Transport
from tubescope.models.channel import Channel
from tubescope.operations import API_HOST, ChannelTab
from tubescope.pagination import VideoPaginator
from tubescope.schema import JsonSchema, SchemaProvider
from tubescope.services.base import InnertubeRequest
from tubescope.services.channel import GetChannelAboutRequest, GetChannelRequest
from tubescope.services.creator import (
    GetCreatorChannelsRequest,
    GetHiddenUsersRequest,
    SearchPublicCreatorEntitiesRequest,
    UpdateHideUserStatusRequest,
)
from tubescope.services.navigation import (
    DetectCountryCodeRequest,
    ResolveConditionalRedirectRequest,
    ResolveUrlRequest,
)
from tubescope.services.subscriptions import HasPublicSubscriptionsRequest
from tubescope.services.videos import (
    GetPopularVideosRequest,
    GetVideosContinuationRequest,
    GetVideosRequest,
)
from tubescope.services.watch_next import GetWatchNextRequest

logger = logging.getLogger(__name__)


class InnertubeClient:
    def __init__(
        self,
        target_host: str = DEFAULT_TARGET_HOST,
        egress_subnet: str | None = None,
        range_id: int | None = None,
        *,
        schema: SchemaProvider | None = None,
        verify_tls: bool = True,
        impersonate: str = "chrome",
    ):
        if range_id is not None and not 0 <= range_id < 1 << RANGE_ID_BITS:
            raise ConfigurationError(f"Range id must fit in {RANGE_ID_BITS} bits, got {range_id}")
        self.target_host = target_host
        self.range_id = range_id
        self.schema = schema or JsonSchema()
        self.verify_tls = verify_tls
        self.impersonate = impersonate
        self._allocator = EgressAllocator(egress_subnet) if egress_subnet else None
        self._transport = self._new_transport()

    @classmethod
    def from_settings(cls, settings: Settings, schema: SchemaProvider | None = None) -> "InnertubeClient":
        return cls(
            settings.target_host,
            settings.egress_subnet,
            settings.egress_range_id,
            schema=schema,
            verify_tls=settings.verify_tls,
            impersonate=settings.impersonate,
        )

    def _new_transport(self) -> Transport:
        address = None
        if self._allocator is not None:
            range_id = self.range_id if self.range_id is not None else random_range_id()
            address = self._allocator.allocate(range_id)
        return Transport(
            self.target_host,
            local_address=address,
            verify=self.verify_tls,
            impersonate=self.impersonate,
        )

    @property
    def local_address(self) -> ipaddress.IPv6Address | None:
        return self._transport.local_address

    async def rotate(self) -> ipaddress.IPv6Address:
        """Move to a freshly drawn egress address. The old transport closes once idle."""
        if self._allocator is None:
            raise ConfigurationError("Cannot rotate egress address: no egress subnet configured")
        previous = self._transport
        self._transport = self._new_transport()
        logger.info("Rotated egress address %s -> %s", previous.local_address, self._transport.local_address)
        await previous.retire()
        return self._transport.local_address

    def proxied_transport(self, proxy_url: str) -> Transport:
        return Transport(API_HOST, proxy=proxy_url, impersonate=self.impersonate)

    async def execute(self, request: InnertubeRequest, transport: Transport | None = None) -> Any:
        transport = transport or self._transport
        prepared = request.prepare(self.schema)
        body = await transport.send(prepared, request.profile)
        if body is None:
            return request.empty_result()
        return request.parse(request.decode(self.schema, body))

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> "InnertubeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # --- Request builders ---

    def get_channel(self, channel_id: str) -> GetChannelRequest:
        return GetChannelRequest(self, channel_id)

    def get_channel_about(self, channel: Channel) -> GetChannelAboutRequest:
        return GetChannelAboutRequest(self, channel)

    def get_videos(self, channel_id: str, tab: ChannelTab = ChannelTab.VIDEOS) -> GetVideosRequest:
        return GetVideosRequest(self, channel_id, tab)

    def get_popular_videos(self, channel_id: str) -> GetPopularVideosRequest:
        return GetPopularVideosRequest(self, channel_id)

    def get_videos_continued(self, continuation: str) -> GetVideosContinuationRequest:
        return GetVideosContinuationRequest(self, continuation)

    def get_watch_next(self, video_id: str) -> GetWatchNextRequest:
        return GetWatchNextRequest(self, video_id)

    def resolve_url(self, url: str) -> ResolveUrlRequest:
        return ResolveUrlRequest(self, url)

    def has_public_subscriptions(self, channel_id: str) -> HasPublicSubscriptionsRequest:
        return HasPublicSubscriptionsRequest(self, channel_id)

    def get_creator_channels(self, channel_ids: list[str]) -> GetCreatorChannelsRequest:
        return GetCreatorChannelsRequest(self, channel_ids)

    def get_hidden_users(self, channel_id: str) -> GetHiddenUsersRequest:
        return GetHiddenUsersRequest(self, channel_id)

    def search_public_creator_entities(self, query: str) -> SearchPublicCreatorEntitiesRequest:
        return SearchPublicCreatorEntitiesRequest(self, query)

    def update_hide_user_status(self, channel_id: str, hide: bool) -> UpdateHideUserStatusRequest:
        return UpdateHideUserStatusRequest(self, channel_id, hide)

    def resolve_conditional_redirect(self, proxy_url: str, channel_id: str) -> ResolveConditionalRedirectRequest:
        return ResolveConditionalRedirectRequest(self, proxy_url, channel_id)

    def detect_country_code(self, proxy_url: str) -> DetectCountryCodeRequest:
        return DetectCountryCodeRequest(self, proxy_url)

    # --- Pagination ---

    def iter_videos(self, channel_id: str, tab: ChannelTab = ChannelTab.VIDEOS) -> VideoPaginator:
        request = self.get_videos(channel_id, tab)
        return VideoPaginator(request.send, self._fetch_continuation)

    def iter_popular_videos(self, channel_id: str) -> VideoPaginator:
        request = self.get_popular_videos(channel_id)
        return VideoPaginator(request.send, self._fetch_continuation)

    async def _fetch_continuation(self, token: str):
        return await self.get_videos_continued(token).send()


@lru_cache
def get_client() -> InnertubeClient:
    return InnertubeClient.from_settings(get_settings())
