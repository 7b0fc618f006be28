from tubescope.exceptions import RequiredFieldMissingError
from tubescope.models.video import WatchNext
from tubescope.operations import Operation
from tubescope.services.base import CHANNEL_ID_PREFIX, InnertubeRequest
from tubescope.tree import dig, items


def parse_watch_next(tree: dict) -> list[WatchNext]:
    """Recommendations in upstream order.

    A missing results container means recommendations are unavailable for the
    video and raises; a present but empty one is a legitimate empty result.
    """
    container = dig(tree, "contents", "twoColumnWatchNextResults", "secondaryResults", "secondaryResults")
    if container is None:
        raise RequiredFieldMissingError("Watch-next results container is missing")

    recommendations = []
    for result in items(container, "results"):
        renderer = dig(result, "compactVideoRenderer")
        if not isinstance(renderer, dict):
            continue
        video_id = renderer.get("videoId")
        browse_id = dig(renderer, "shortBylineText", "runs", 0, "navigationEndpoint", "browseEndpoint", "browseId")
        if not video_id or not isinstance(browse_id, str) or not browse_id.startswith(CHANNEL_ID_PREFIX):
            continue
        recommendations.append(WatchNext(user_id=browse_id[len(CHANNEL_ID_PREFIX):], video_id=video_id))
    return recommendations


class GetWatchNextRequest(InnertubeRequest):
    operation = Operation.WATCH_NEXT

    def __init__(self, client, video_id: str):
        super().__init__(client)
        self.video_id = video_id

    def payload(self) -> dict:
        return {"videoId": self.video_id}

    def parse(self, tree: dict) -> list[WatchNext]:
        return parse_watch_next(tree)
