from tubescope.operations import Operation
from tubescope.services.base import InnertubeRequest
from tubescope.tree import text, walk

SUBSCRIPTIONS_SHELF_TITLE = "Subscriptions"


class HasPublicSubscriptionsRequest(InnertubeRequest):
    """Whether a channel exposes its subscription list. Only the TV front-end reports it."""

    operation = Operation.PUBLIC_SUBSCRIPTIONS

    def __init__(self, client, channel_id: str):
        super().__init__(client)
        self.channel_id = channel_id

    def payload(self) -> dict:
        return {"browseId": self.channel_id}

    def parse(self, tree: dict) -> bool:
        titles = walk(
            tree, "contents", "tvBrowseRenderer", "content", "tvSurfaceContentRenderer", "content",
            "sectionListRenderer", "contents", "shelfRenderer", "headerRenderer", "shelfHeaderRenderer",
            "avatarLockup", "avatarLockupRenderer", "title",
        )
        return any(text(title) == SUBSCRIPTIONS_SHELF_TITLE for title in titles)
