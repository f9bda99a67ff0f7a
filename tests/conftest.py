from __future__ import annotations

from collections.abc import Sequence

from converge.types.snapshot import ImageMetadata, NodeMetadata


class ScriptedClient:
    """Fake compute client that plays back a script of responses.

    Each script entry is returned by one call, in order; the last entry is
    repeated once the script runs out. Exception instances are raised.
    """

    def __init__(self, script: Sequence[object]) -> None:
        self._script = list(script)
        self.calls: list[str] = []

    def _next(self, identity: str):
        self.calls.append(identity)
        index = min(len(self.calls), len(self._script)) - 1
        response = self._script[index]
        if isinstance(response, BaseException):
            raise response
        return response

    def get_node(self, node_id: str) -> NodeMetadata | None:
        return self._next(node_id)

    def get_image(self, image_id: str) -> ImageMetadata | None:
        return self._next(image_id)


