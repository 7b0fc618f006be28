"""Wire encodings for request and response messages.

The client never depends on a concrete upstream schema. A schema provider
turns a message name plus a dict of fields into bytes, and bytes back into
a dict tree in which absent fields are simply missing. `JsonSchema` speaks
the API's JSON rendering; `ProtobufSchema` wraps compiled message classes
for the binary rendering.

The few messages this package owns itself (the browse continuation token
and the hide-user action) are defined here with descriptor_pb2 and always
encoded as protobuf, whatever provider carries the surrounding request.
"""

import base64
import binascii
import json
from collections.abc import Mapping
from typing import Protocol

from google.protobuf import descriptor_pb2, descriptor_pool, json_format, message_factory
from google.protobuf.message import DecodeError as ProtobufDecodeError
from google.protobuf.message import Message

from tubescope.exceptions import ConfigurationError, DecodeError


class SchemaProvider(Protocol):
    content_type: str

    def encode(self, message: str, fields: dict) -> bytes: ...

    def decode(self, message: str, data: bytes) -> dict: ...


class JsonSchema:
    content_type = "application/json"

    def encode(self, message: str, fields: dict) -> bytes:
        return json.dumps(fields, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    def decode(self, message: str, data: bytes) -> dict:
        try:
            tree = json.loads(data)
        except (UnicodeDecodeError, ValueError) as e:
            raise DecodeError(f"Malformed {message} body: {e}") from e
        if not isinstance(tree, dict):
            raise DecodeError(f"Malformed {message} body: expected an object, got {type(tree).__name__}")
        return tree


class ProtobufSchema:
    """Adapter over compiled protobuf classes, keyed by message name."""

    content_type = "application/x-protobuf"

    def __init__(self, messages: Mapping[str, type[Message]]):
        self._messages = dict(messages)

    def _message_class(self, message: str) -> type[Message]:
        try:
            return self._messages[message]
        except KeyError:
            raise ConfigurationError(f"No protobuf class registered for {message}") from None

    def encode(self, message: str, fields: dict) -> bytes:
        parsed = json_format.ParseDict(fields, self._message_class(message)(), ignore_unknown_fields=True)
        return parsed.SerializeToString()

    def decode(self, message: str, data: bytes) -> dict:
        try:
            parsed = self._message_class(message).FromString(data)
        except ProtobufDecodeError as e:
            raise DecodeError(f"Malformed {message} body: {e}") from e
        return json_format.MessageToDict(parsed)


def decode_base64_body(data: bytes) -> bytes:
    try:
        return base64.b64decode(data.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Response body is not valid base64: {e}") from e


# --- Locally owned messages ---

_PACKAGE = "tubescope.local"

# Field number under which browse continuations carry their payload.
CONTINUATION_FIELD_NUMBER = 80226972

HIDE_USER = 1
UNHIDE_USER = 2


def _build_local_messages() -> dict[str, type[Message]]:
    field = descriptor_pb2.FieldDescriptorProto
    file_proto = descriptor_pb2.FileDescriptorProto(name="tubescope/local.proto", package=_PACKAGE, syntax="proto3")

    token = file_proto.message_type.add(name="ContinuationToken")
    token.field.add(name="channel_id", number=2, type=field.TYPE_STRING, label=field.LABEL_OPTIONAL)
    token.field.add(name="request_token", number=3, type=field.TYPE_STRING, label=field.LABEL_OPTIONAL)

    continuation = file_proto.message_type.add(name="ChannelContinuation")
    continuation.field.add(
        name="token",
        number=CONTINUATION_FIELD_NUMBER,
        type=field.TYPE_MESSAGE,
        type_name=f".{_PACKAGE}.ContinuationToken",
        label=field.LABEL_OPTIONAL,
    )

    action = file_proto.message_type.add(name="HideUserAction")
    action.field.add(name="user_id", number=1, type=field.TYPE_STRING, label=field.LABEL_OPTIONAL)
    action.field.add(name="options", number=2, type=field.TYPE_INT32, label=field.LABEL_OPTIONAL)

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    return {
        name: message_factory.GetMessageClass(pool.FindMessageTypeByName(f"{_PACKAGE}.{name}"))
        for name in ("ContinuationToken", "ChannelContinuation", "HideUserAction")
    }


LOCAL_MESSAGES = _build_local_messages()
ChannelContinuation = LOCAL_MESSAGES["ChannelContinuation"]
HideUserAction = LOCAL_MESSAGES["HideUserAction"]


def synthesize_continuation(channel_id: str, routing_token: str) -> str:
    """Build a browse continuation token for a channel without asking upstream for one."""
    continuation = ChannelContinuation()
    continuation.token.channel_id = channel_id
    continuation.token.request_token = routing_token
    return base64.b64encode(continuation.SerializeToString()).decode("ascii")


def encode_hide_user_action(user_id: str, hide: bool) -> str:
    action = HideUserAction(user_id=user_id, options=HIDE_USER if hide else UNHIDE_USER)
    return base64.b64encode(action.SerializeToString()).decode("ascii")
