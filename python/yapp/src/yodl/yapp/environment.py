"""
Environment ports

The guest runs inside a browsing context it does not own. These protocols
describe the few capabilities the SDK needs from it, so adapters for a real
browser bridge and in-memory doubles can be swapped freely.
"""

from typing import Any, Callable, Protocol

MessageHook = Callable[[str, Any], None]
VisibilityListener = Callable[[], None]


class HostWindow(Protocol):
    """Cross-window messaging capability"""

    def is_embedded(self) -> bool:
        """True when a distinct parent window is reachable"""
        ...

    def post_to_parent(self, message: dict[str, Any], target_origin: str) -> None:
        """Dispatch a structured message to the parent window"""
        ...

    def add_message_listener(self, callback: MessageHook) -> None:
        """Install a receive hook called with (sender_origin, data)"""
        ...


class SessionStorage(Protocol):
    """Storage scoped to the browsing session, survives navigation"""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class PageContext(Protocol):
    """Location, history and visibility of the current document"""

    def current_url(self) -> str: ...

    def navigate(self, url: str) -> None:
        """Leave the current document for url"""
        ...

    def replace_url(self, url: str) -> None:
        """Rewrite the address without adding a history entry"""
        ...

    def is_visible(self) -> bool: ...

    def add_visibility_listener(self, listener: VisibilityListener) -> None: ...

    def remove_visibility_listener(self, listener: VisibilityListener) -> None: ...


class MemorySessionStorage:
    """Dict-backed SessionStorage"""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
