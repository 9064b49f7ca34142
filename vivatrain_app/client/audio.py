"""
Audio attachment coordinator.

The view uploads a recording on its own and emits ``save_file`` with the
remote URL once the upload completes. Controllers that need that URL call
:meth:`AudioAttachmentCoordinator.request_audio_url` and await the returned
future. Every future pending when an upload completes resolves with that
upload's URL, in the order the requests were made. A request always waits
for the next ``save_file``; an upload that completes while nobody is
waiting resolves nothing.
"""

import asyncio
import logging
from collections import deque
from typing import Deque, Optional

from .views import View

logger = logging.getLogger(__name__)


class AudioAttachmentCoordinator:
    def __init__(self, view: View):
        self.view = view
        self.last_url: Optional[str] = None
        self._pending: Deque[asyncio.Future] = deque()
        self._subscription = view.on('save_file', self.on_file_saved)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request_audio_url(self) -> "asyncio.Future[str]":
        """Future resolved with the URL of the next completed upload."""
        future = asyncio.get_running_loop().create_future()
        self._pending.append(future)
        return future

    def on_file_saved(self, url: str, **_payload) -> int:
        """Resolve every pending request with ``url``; returns how many resolved."""
        self.last_url = url
        # Swap the queue out first so a request made while resolving waits for the next upload
        pending, self._pending = self._pending, deque()
        resolved = 0
        while pending:
            future = pending.popleft()
            if future.done():
                continue
            future.set_result(url)
            resolved += 1
        if not resolved:
            logger.debug("Upload %s completed with no save waiting for it", url)
        else:
            logger.debug("Upload %s resolved %d pending save request(s)", url, resolved)
        return resolved

    def close(self) -> None:
        self._subscription.unsubscribe()
        while self._pending:
            future = self._pending.popleft()
            if not future.done():
                future.cancel()
