"""
View contract the client controllers drive.

A view publishes named events (``answer``, ``next``, ``save_file``,
``filter_update``, ``add_sentence``, ``remove_sentence``, ``save``,
``delete``, ``submit``, ``click``) and accepts imperative updates
(``prompt``, ``answer``, ``audio_url``, ``update_counts``, ``finish``,
``update_display``, ``delete_row``, ``clear_form_data``). Events are
blinker signals, one per event name and view instance.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from blinker import Signal

logger = logging.getLogger(__name__)


@dataclass
class Subscription:
    """Handle returned by :meth:`View.on`; disconnects the handler."""

    event: str
    signal: Signal
    receiver: Callable[..., Any]

    def unsubscribe(self) -> None:
        self.signal.disconnect(self.receiver)


class View:
    """
    Base class for presentation surfaces.

    Subclasses render however they like; controllers only rely on ``on``,
    ``emit`` and the setters documented in the module docstring.
    """

    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def _signal(self, event: str) -> Signal:
        if event not in self._signals:
            self._signals[event] = Signal(event)
        return self._signals[event]

    def on(self, event: str, handler: Callable[..., Any]) -> Subscription:
        """Subscribe ``handler(**payload)`` to ``event``."""
        def receiver(sender, **payload):
            return handler(**payload)

        signal = self._signal(event)
        signal.connect(receiver, weak=False)
        return Subscription(event, signal, receiver)

    async def emit(self, event: str, **payload) -> List[Any]:
        """
        Dispatch ``event`` to its handlers and wait for each to finish.

        Coroutine handlers are awaited one after another.
        """
        results = []
        for _receiver, result in self._signal(event).send(self, **payload):
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results


class AlertView:
    """Transient, dismissable user-visible alerts."""

    def show(self, kind: str, message: str) -> None:
        level = logging.ERROR if kind == 'error' else logging.INFO
        logger.log(level, "[%s] %s", kind, message)


class Navigator:
    """Navigation capability invoked at login, logout, signup and task completion."""

    def __init__(self):
        self.location = None

    def assign(self, url: str) -> None:
        logger.info("Navigating to %s", url)
        self.location = url

    async def assign_after(self, url: str, delay: float) -> None:
        if delay > 0:
            await asyncio.sleep(delay)
        self.assign(url)
