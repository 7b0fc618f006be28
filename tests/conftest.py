import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient


# --- Canned upstream responses ---

CHANNEL_ID = "UCX6OQ3DkcsbYNE6H8uQQuVA"
USER_ID = "X6OQ3DkcsbYNE6H8uQQuVA"

CHANNEL_TREE = {
    "contents": {
        "twoColumnBrowseResultsRenderer": {
            "tabs": [
                {"tabRenderer": {"title": "Home"}},
                {"tabRenderer": {"title": "Videos"}},
                {"tabRenderer": {"title": "Shorts"}},
            ],
        },
    },
    "header": {
        "pageHeaderRenderer": {
            "content": {
                "pageHeaderViewModel": {
                    "title": {
                        "dynamicTextViewModel": {
                            "text": {
                                "attachmentRuns": [{
                                    "element": {"type": {"imageType": {"image": {"sources": [
                                        {"clientResource": {"imageName": "CHECK_CIRCLE_FILLED"}},
                                    ]}}}},
                                }],
                            },
                        },
                    },
                    "banner": {
                        "imageBannerViewModel": {
                            "image": {"sources": [
                                {"url": "https://yt3.googleusercontent.com/banner123=w1060-fcrop64"},
                            ]},
                        },
                    },
                },
            },
        },
    },
    "metadata": {
        "channelMetadataRenderer": {
            "title": "MrBeast",
            "description": "Videos every week",
            "avatar": {"thumbnails": [{"url": "https://yt3.googleusercontent.com/avatar456=s900-c-k"}]},
        },
    },
    "microformat": {
        "microformatDataRenderer": {
            "noindex": False,
            "unlisted": False,
            "familySafe": True,
            "tags": ["challenge", "philanthropy", "challenge"],
            "availableCountries": ["US", "CA"],
        },
    },
}

TERMINATED_CHANNEL_TREE = {
    "alerts": [{
        "alertRenderer": {
            "text": {"simpleText": "This account has been terminated for a violation of YouTube's Terms of Service."},
        },
    }],
}

HIDDEN_CHANNEL_TREE = {"alerts": [{"alertRenderer": {"text": {"simpleText": "This channel is not available."}}}]}

DELETED_CHANNEL_TREE = {"alerts": [{"alertRenderer": {"text": {"simpleText": "This channel does not exist."}}}]}

CHANNEL_ABOUT_TREE = {
    "onResponseReceivedEndpoints": [{
        "appendContinuationItemsAction": {
            "continuationItems": [{
                "aboutChannelRenderer": {
                    "metadata": {
                        "aboutChannelViewModel": {
                            "country": "United States",
                            "subscriberCountText": "341M subscribers",
                            "viewCountText": "61,943,233,845 views",
                            "videoCountText": "839 videos",
                            "joinedDateText": {"content": "Joined Feb 19, 2012"},
                            "canonicalChannelUrl": "http://www.youtube.com/@MrBeast",
                            "signInForBusinessEmail": {"content": "Sign in to see email address"},
                            "links": [
                                {"channelExternalLinkViewModel": {
                                    "title": {"content": "Instagram"},
                                    "link": {"content": "instagram.com/mrbeast"},
                                }},
                                {"channelExternalLinkViewModel": {
                                    "title": {"content": "Broken"},
                                }},
                            ],
                        },
                    },
                },
            }],
        },
    }],
}


def video_item(video_id, views="1,234 views", length="3:45", published="2 days ago", **extra):
    renderer = {"videoId": video_id}
    if views is not None:
        renderer["viewCountText"] = {"simpleText": views}
    if length is not None:
        renderer["lengthText"] = {"simpleText": length}
    if published is not None:
        renderer["publishedTimeText"] = {"simpleText": published}
    renderer.update(extra)
    return {"richItemRenderer": {"content": {"videoRenderer": renderer}}}


def continuation_item(token):
    return {"continuationItemRenderer": {"continuationEndpoint": {"continuationCommand": {"token": token}}}}


VIDEOS_TREE = {
    "contents": {
        "twoColumnBrowseResultsRenderer": {
            "tabs": [
                {"tabRenderer": {"title": "Home"}},
                {"tabRenderer": {
                    "title": "Videos",
                    "content": {"richGridRenderer": {"contents": [
                        video_item("dQw4w9WgXcQ", badges=[{"metadataBadgeRenderer": {"label": "4K"}}]),
                        video_item("upcoming000", upcomingEventData={"startTime": "1700000000"}),
                        video_item("9bZkp7q1VgY", views="No views", length="1:02:03"),
                        video_item("kJQP7kiw5Fk", views=None, length="LIVE", published=None),
                        continuation_item("token-page-2"),
                    ]}},
                }},
            ],
        },
    },
}

CONTINUATION_TREE = {
    "onResponseReceivedActions": [{
        "appendContinuationItemsAction": {
            "continuationItems": [
                video_item("OPf0YbXqDm0"),
                continuation_item("token-page-3"),
            ],
        },
    }],
}

LAST_PAGE_TREE = {
    "onResponseReceivedActions": [{
        "appendContinuationItemsAction": {"continuationItems": [video_item("fJ9rUzIMcZQ")]},
    }],
}

POPULAR_TREE = {
    "onResponseReceivedActions": [{
        "reloadContinuationItemsCommand": {
            "continuationItems": [
                video_item("RgKAFK5djSk", views="12,345,678 views"),
                continuation_item("token-popular-2"),
            ],
        },
    }],
}

WATCH_NEXT_TREE = {
    "contents": {
        "twoColumnWatchNextResults": {
            "secondaryResults": {
                "secondaryResults": {
                    "results": [
                        {"compactVideoRenderer": {
                            "videoId": "9bZkp7q1VgY",
                            "shortBylineText": {"runs": [
                                {"navigationEndpoint": {"browseEndpoint": {"browseId": "UCrDkAvwZum-UTjHmzDI2iIw"}}},
                            ]},
                        }},
                        {"compactPlaylistRenderer": {"playlistId": "PL123"}},
                        {"compactVideoRenderer": {
                            "videoId": "kJQP7kiw5Fk",
                            "shortBylineText": {"runs": [
                                {"navigationEndpoint": {"browseEndpoint": {"browseId": "UCLp8RBhQHu9wSsq62j_Md6A"}}},
                            ]},
                        }},
                    ],
                },
            },
        },
    },
}

CREATOR_CHANNELS_TREE = {
    "channels": [{
        "channelId": CHANNEL_ID,
        "title": "MrBeast",
        "channelHandle": "@MrBeast",
        "isNameVerified": True,
        "thumbnailDetails": {"thumbnails": [{"url": "https://lh3.ggpht.com/avatar789=s88-c-k"}]},
        "metric": {"subscriberCount": "341000000", "totalVideoViewCount": "61943233845", "videoCount": "839"},
        "timeCreatedSeconds": "1329609600",
    }],
}

HIDDEN_USERS_TREE = {
    "channels": [{
        "commentsSettings": {
            "hiddenUsers": [
                {
                    "displayName": "Spammer",
                    "externalChannelId": "UCabcdefghijklmnopqrstuv",
                    "avatarThumbnail": {"thumbnails": [{"url": "https://lh3.ggpht.com/spam111=s88"}]},
                },
                {
                    "displayName": "Default Avatar",
                    "externalChannelId": "UCzyxwvutsrqponmlkjihgfe",
                    "avatarThumbnail": {"thumbnails": [{"url": "https://yt3.ggpht.com/ytc/default=s88"}]},
                },
            ],
        },
    }],
}


def upstream_response(status_code=200, tree=None, content=None):
    """A stand-in for a curl_cffi response."""
    resp = MagicMock()
    resp.status_code = status_code
    if content is None:
        content = json.dumps(tree if tree is not None else {}).encode()
    resp.content = content
    return resp


@pytest.fixture
def mock_session(mocker):
    """Patch curl_cffi's AsyncSession; every Transport shares this session mock."""
    session = MagicMock()
    session.post = AsyncMock(return_value=upstream_response())
    session.close = AsyncMock()
    mocker.patch("tubescope.http_client.AsyncSession", return_value=session)
    return session


@pytest.fixture
def client(mock_session):
    from tubescope.client import InnertubeClient
    return InnertubeClient()


@pytest.fixture
def egress_client(mock_session):
    from tubescope.client import InnertubeClient
    return InnertubeClient(egress_subnet="2001:db8:1234::/48", range_id=7)


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from tubescope.main import api
    return TestClient(api)
