"""URL resolution, plus the two browse probes that run through a caller's proxy."""

from tubescope.exceptions import RequiredFieldMissingError
from tubescope.models.navigation import ConditionalRedirect, CountryCode, ResolvedUrl
from tubescope.operations import WHAT_TO_WATCH_BROWSE_ID, Operation
from tubescope.services.base import InnertubeRequest
from tubescope.services.channel import HIDDEN_ALERT
from tubescope.tree import dig, text

DEFAULT_COUNTRY_CODE = "US"


class ResolveUrlRequest(InnertubeRequest):
    """Resolve a youtube.com URL. Unknown URLs (404) resolve to None."""

    operation = Operation.RESOLVE_URL

    def __init__(self, client, url: str):
        super().__init__(client)
        self.url = url

    def payload(self) -> dict:
        return {"url": self.url}

    def parse(self, tree: dict) -> ResolvedUrl | None:
        browse_id = dig(tree, "endpoint", "browseEndpoint", "browseId") or None
        url = dig(tree, "endpoint", "urlEndpoint", "url") or None
        if browse_id is None and url is None:
            return None
        return ResolvedUrl(browse_endpoint=browse_id, url_endpoint=url)


class ProxiedRequest(InnertubeRequest):
    """A request sent from a short-lived transport that egresses through `proxy_url`."""

    def __init__(self, client, proxy_url: str):
        super().__init__(client)
        self.proxy_url = proxy_url

    async def send(self):
        transport = self._client.proxied_transport(self.proxy_url)
        try:
            return await self._client.execute(self, transport=transport)
        finally:
            await transport.aclose()


class ResolveConditionalRedirectRequest(ProxiedRequest):
    operation = Operation.CONDITIONAL_REDIRECT

    def __init__(self, client, proxy_url: str, channel_id: str):
        super().__init__(client, proxy_url)
        self.channel_id = channel_id

    def payload(self) -> dict:
        return {"browseId": self.channel_id}

    def parse(self, tree: dict) -> ConditionalRedirect | None:
        if text(tree, "alerts", "alertRenderer", "text") == HIDDEN_ALERT:
            return ConditionalRedirect(kind="blocked")
        endpoint = dig(tree, "onResponseReceivedActions", "navigateAction", "endpoint", "browseEndpoint")
        if endpoint is not None:
            return ConditionalRedirect(kind="channel", channel_id=endpoint.get("browseId"))
        return None


class DetectCountryCodeRequest(ProxiedRequest):
    """Ask upstream which country it places the proxy's address in."""

    operation = Operation.DETECT_COUNTRY

    def payload(self) -> dict:
        return {"browseId": WHAT_TO_WATCH_BROWSE_ID}

    def parse(self, tree: dict) -> CountryCode:
        topbar = dig(tree, "topbar", "desktopTopbarRenderer")
        if topbar is None:
            raise RequiredFieldMissingError("Country code not found in response")
        return CountryCode(country_code=topbar.get("countryCode") or DEFAULT_COUNTRY_CODE)
