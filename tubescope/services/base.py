"""Request builder base.

A builder holds one operation's inputs plus optional credentials and turns
them into a PreparedRequest without touching the network. `send()` hands the
builder back to the client that created it, which owns the transport.
"""

import copy
from typing import TYPE_CHECKING, Any, ClassVar

from tubescope.exceptions import AuthenticationError, InvalidInputError
from tubescope.http_client import PreparedRequest
from tubescope.operations import Operation, OperationProfile, profile_for
from tubescope.schema import JsonSchema, SchemaProvider

if TYPE_CHECKING:
    from tubescope.client import InnertubeClient

CHANNEL_ID_PREFIX = "UC"

_JSON = JsonSchema()


def user_id_from_channel_id(channel_id: str) -> str:
    """Strip the 'UC' prefix that distinguishes channel ids from user ids."""
    if len(channel_id) <= len(CHANNEL_ID_PREFIX) or not channel_id.startswith(CHANNEL_ID_PREFIX):
        raise InvalidInputError(f"Not a channel id: {channel_id!r}")
    return channel_id[len(CHANNEL_ID_PREFIX):]


class InnertubeRequest:
    operation: ClassVar[Operation]

    def __init__(self, client: "InnertubeClient"):
        self._client = client
        self.authorization: str | None = None
        self.cookie: str | None = None

    @property
    def profile(self) -> OperationProfile:
        return profile_for(self.operation)

    def with_authorization(self, authorization: str):
        request = copy.copy(self)
        request.authorization = authorization
        return request

    def with_cookie(self, cookie: str):
        request = copy.copy(self)
        request.cookie = cookie
        return request

    def payload(self) -> dict:
        """Operation-specific request fields, merged next to the client context."""
        raise NotImplementedError

    def parse(self, tree: dict) -> Any:
        raise NotImplementedError

    def empty_result(self) -> Any:
        """Result for an operation whose 404 means 'nothing there'."""
        return None

    def schema_for(self, schema: SchemaProvider) -> SchemaProvider:
        return _JSON if self.profile.json_only else schema

    def prepare(self, schema: SchemaProvider) -> PreparedRequest:
        profile = self.profile
        if profile.requires_authorization and not self.authorization:
            raise AuthenticationError(f"{self.operation.value} requires an authorization header")
        if profile.requires_cookie and not self.cookie:
            raise AuthenticationError(f"{self.operation.value} requires a session cookie")

        schema = self.schema_for(schema)
        fields = {"context": profile.identity.context(), **self.payload()}
        headers = {
            "Host": profile.host,
            "Content-Type": schema.content_type,
        }
        if profile.field_mask:
            headers["X-Goog-FieldMask"] = profile.field_mask
        if profile.origin:
            headers["Origin"] = profile.origin
        headers.update(profile.extra_headers)
        if self.authorization:
            headers["Authorization"] = self.authorization
        if self.cookie:
            headers["Cookie"] = self.cookie

        return PreparedRequest(
            operation=self.operation,
            path=profile.path,
            headers=headers,
            body=schema.encode(profile.request_message, fields),
        )

    def decode(self, schema: SchemaProvider, body: bytes) -> dict:
        return self.schema_for(schema).decode(self.profile.response_message, body)

    async def send(self) -> Any:
        return await self._client.execute(self)
