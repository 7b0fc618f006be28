import asyncio
import base64
import json
from datetime import datetime, timezone

import pytest

from tubescope.exceptions import InvalidInputError, NotFoundError
from tubescope.models.channel import EPOCH, Channel, Link
from tubescope.operations import ABOUT_ROUTING_TOKEN, CHANNEL_ABOUT_MASK, CHANNEL_MASK
from tubescope.schema import ChannelContinuation
from tubescope.services.channel import apply_channel_about, parse_channel
from conftest import (
    CHANNEL_ABOUT_TREE,
    CHANNEL_ID,
    CHANNEL_TREE,
    DELETED_CHANNEL_TREE,
    HIDDEN_CHANNEL_TREE,
    TERMINATED_CHANNEL_TREE,
    USER_ID,
    upstream_response,
)


class TestParseChannel:
    def test_full_profile(self):
        channel = parse_channel(CHANNEL_TREE, CHANNEL_ID)
        assert channel.user_id == USER_ID
        assert channel.channel_id == CHANNEL_ID
        assert channel.display_name == "MrBeast"
        assert channel.description == "Videos every week"
        assert channel.verified is True
        assert channel.oac is False
        assert channel.profile_picture == "avatar456"
        assert channel.banner == "banner123"
        assert channel.channel_tabs == ["Home", "Videos", "Shorts"]
        assert channel.tags == ["challenge", "philanthropy"]
        assert channel.family_safe is True
        assert "US" not in channel.blocked_countries
        assert "CA" not in channel.blocked_countries
        assert "GB" in channel.blocked_countries
        assert channel.available

    def test_minimal_tree_uses_defaults(self):
        channel = parse_channel({}, CHANNEL_ID)
        assert channel.display_name == ""
        assert channel.profile_picture is None
        assert channel.banner is None
        assert channel.tags == []
        assert channel.blocked_countries == []
        assert channel.family_safe is True
        assert channel.created_at == EPOCH

    def test_family_safe_defaults_false_when_microformat_present(self):
        channel = parse_channel({"microformat": {"microformatDataRenderer": {"noindex": True}}}, CHANNEL_ID)
        assert channel.family_safe is False
        assert channel.no_index is True

    def test_singular_banner_sources(self):
        tree = json.loads(json.dumps(CHANNEL_TREE))
        image = tree["header"]["pageHeaderRenderer"]["content"]["pageHeaderViewModel"]["banner"]["imageBannerViewModel"]["image"]
        image["sources"] = image["sources"][0]
        assert parse_channel(tree, CHANNEL_ID).banner == "banner123"

    def test_artist_badge(self):
        tree = json.loads(json.dumps(CHANNEL_TREE).replace("CHECK_CIRCLE_FILLED", "MUSIC_FILLED"))
        channel = parse_channel(tree, CHANNEL_ID)
        assert channel.oac is True
        assert channel.verified is False

    def test_default_avatar_excluded(self):
        tree = {"metadata": {"channelMetadataRenderer": {
            "avatar": {"thumbnails": [{"url": "https://yt3.ggpht.com/default-avatar.jpg"}]},
        }}}
        assert parse_channel(tree, CHANNEL_ID).profile_picture is None

    def test_carousel(self):
        tree = {"header": {"carouselHeaderRenderer": {"contents": []}}}
        assert parse_channel(tree, CHANNEL_ID).has_carousel is True

    def test_terminated(self):
        channel = parse_channel(TERMINATED_CHANNEL_TREE, CHANNEL_ID)
        assert channel.terminated is True
        assert channel.termination_reason.startswith("This account has been terminated")
        assert not channel.hidden and not channel.deleted

    def test_hidden(self):
        channel = parse_channel(HIDDEN_CHANNEL_TREE, CHANNEL_ID)
        assert channel.hidden is True
        assert not channel.terminated and not channel.deleted

    def test_deleted(self):
        channel = parse_channel(DELETED_CHANNEL_TREE, CHANNEL_ID)
        assert channel.deleted is True
        assert not channel.terminated and not channel.hidden

    def test_idempotent(self):
        assert parse_channel(CHANNEL_TREE, CHANNEL_ID) == parse_channel(CHANNEL_TREE, CHANNEL_ID)

    def test_rejects_non_channel_id(self):
        with pytest.raises(InvalidInputError):
            parse_channel({}, "U")


class TestApplyChannelAbout:
    def test_enriches(self):
        channel = apply_channel_about(Channel(user_id=USER_ID), CHANNEL_ABOUT_TREE)
        assert channel.subscribers == 341_000_000
        assert channel.views == 61943233845
        assert channel.videos == 839
        assert channel.handle == "MrBeast"
        assert channel.country == "US"
        assert channel.has_business_email is True
        assert channel.links == [Link(name="Instagram", url="instagram.com/mrbeast")]
        assert channel.created_at == datetime(2012, 2, 19, tzinfo=timezone.utc)

    def test_never_clears_existing_fields(self):
        channel = Channel(user_id=USER_ID, display_name="Kept", handle="old", subscribers=5, country="GB")
        apply_channel_about(channel, {})
        assert channel.display_name == "Kept"
        assert channel.handle == "old"
        assert channel.subscribers == 5
        assert channel.country == "GB"

    def test_absent_metrics_stay_none(self):
        tree = {"onResponseReceivedEndpoints": [{"appendContinuationItemsAction": {"continuationItems": [
            {"aboutChannelRenderer": {"metadata": {"aboutChannelViewModel": {"country": "Atlantis"}}}},
        ]}}]}
        channel = apply_channel_about(Channel(user_id=USER_ID), tree)
        assert channel.subscribers is None
        assert channel.views is None
        assert channel.country is None

    def test_url_encoded_handle(self):
        tree = {"onResponseReceivedEndpoints": [{"appendContinuationItemsAction": {"continuationItems": [
            {"aboutChannelRenderer": {"metadata": {"aboutChannelViewModel": {
                "canonicalChannelUrl": "http://www.youtube.com/@%E3%83%86%E3%82%B9%E3%83%88",
            }}}},
        ]}}]}
        assert apply_channel_about(Channel(user_id=USER_ID), tree).handle == "テスト"


class TestGetChannelRequest:
    def test_prepare(self, client):
        prepared = client.get_channel(CHANNEL_ID).prepare(client.schema)
        assert prepared.path == "/youtubei/v1/browse"
        assert prepared.headers["X-Goog-FieldMask"] == CHANNEL_MASK
        assert prepared.headers["Host"] == "youtubei.googleapis.com"
        assert prepared.headers["Content-Type"] == "application/json"
        assert "Authorization" not in prepared.headers
        body = json.loads(prepared.body)
        assert body["browseId"] == CHANNEL_ID
        assert body["context"]["client"] == {"clientName": 1, "clientVersion": "2.20240614.01.00"}

    def test_prepare_is_pure(self, client, mock_session):
        request = client.get_channel(CHANNEL_ID)
        assert request.prepare(client.schema) == request.prepare(client.schema)
        mock_session.post.assert_not_called()

    def test_invalid_channel_id(self, client):
        with pytest.raises(InvalidInputError):
            client.get_channel("X")

    def test_send(self, client, mock_session):
        mock_session.post.return_value = upstream_response(tree=CHANNEL_TREE)
        channel = asyncio.run(client.get_channel(CHANNEL_ID).send())
        assert channel.display_name == "MrBeast"

    def test_send_not_found(self, client, mock_session):
        mock_session.post.return_value = upstream_response(404)
        with pytest.raises(NotFoundError):
            asyncio.run(client.get_channel(CHANNEL_ID).send())


class TestGetChannelAboutRequest:
    def test_synthesized_continuation(self, client):
        prepared = client.get_channel_about(Channel(user_id=USER_ID)).prepare(client.schema)
        assert prepared.headers["X-Goog-FieldMask"] == CHANNEL_ABOUT_MASK
        token = json.loads(prepared.body)["continuation"]
        parsed = ChannelContinuation.FromString(base64.b64decode(token))
        assert parsed.token.channel_id == CHANNEL_ID
        assert parsed.token.request_token == ABOUT_ROUTING_TOKEN

    def test_send_enriches_in_place(self, client, mock_session):
        channel = Channel(user_id=USER_ID, display_name="MrBeast")
        mock_session.post.return_value = upstream_response(tree=CHANNEL_ABOUT_TREE)
        result = asyncio.run(client.get_channel_about(channel).send())
        assert result is channel
        assert channel.subscribers == 341_000_000
        assert channel.display_name == "MrBeast"
