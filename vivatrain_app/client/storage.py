"""Key-based accessor over page data written by the server-rendered pages."""

import copy
import json
import re
from typing import Any, Dict, Optional

LOCAL_DATA_PATTERN = re.compile(
    r'<script[^>]*id="local-data"[^>]*>(?P<body>.*?)</script>',
    re.DOTALL,
)


class LocalStore:
    """
    Session-scoped storage for item lists and user/task context.

    Values are copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(data) if data else {}

    @classmethod
    def from_json(cls, text: str) -> "LocalStore":
        return cls(json.loads(text))

    @classmethod
    def from_page(cls, html: str) -> "LocalStore":
        """Read the ``local-data`` script block a rendered page embeds."""
        match = LOCAL_DATA_PATTERN.search(html)
        if match is None:
            return cls()
        return cls.from_json(match.group('body'))

    def get_local(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set_local(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove_local(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data
