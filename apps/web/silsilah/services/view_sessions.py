# apps/web/silsilah/services/view_sessions.py
from __future__ import annotations
import time
import secrets
import threading
from collections import OrderedDict
from concurrent.futures import Executor
from typing import Any, Optional

from ..models import TreeNode
from .detail_panel import DetailFetcher, DetailPanel
from .tree_render import SelectionEvent, TreeRenderer
from .viewport import ViewportController


class TTLCache:
    def __init__(self, ttl=1800, max_items=500, on_evict=None):
        self.ttl = ttl
        self.max = max_items
        self.data = OrderedDict()
        self.on_evict = on_evict
        self._lock = threading.Lock()

    def _evicted(self, value):
        if self.on_evict is not None:
            self.on_evict(value)

    def get(self, key):
        expired = None
        with self._lock:
            if key in self.data:
                ts, val = self.data[key]
                if time.time() - ts < self.ttl:
                    # touching a view keeps it alive
                    self.data[key] = (time.time(), val)
                    self.data.move_to_end(key)
                    return val
                expired = self.data.pop(key)[1]
        if expired is not None:
            self._evicted(expired)
        return None

    def set(self, key, value):
        evicted = None
        with self._lock:
            self.data[key] = (time.time(), value)
            self.data.move_to_end(key)
            if len(self.data) > self.max:
                evicted = self.data.popitem(last=False)[1][1]
        if evicted is not None:
            self._evicted(evicted)

    def pop(self, key):
        with self._lock:
            item = self.data.pop(key, None)
            return item[1] if item else None

    def __len__(self):
        with self._lock:
            return len(self.data)


class TreeView:
    """
    Everything one rendered tree page owns: its viewport, its renderer and
    its detail drawer. Selections flow renderer -> panel as events.
    """

    def __init__(self, tree_id: str, root: TreeNode, fetch: DetailFetcher, executor: Executor,
                 viewport: ViewportController | None = None):
        self.view_id = secrets.token_urlsafe(12)
        self.tree_id = tree_id
        self.viewport = viewport or ViewportController()
        # viewport events of one page are applied one at a time
        self.lock = threading.Lock()
        self.panel = DetailPanel(fetch, executor)
        self.renderer = TreeRenderer(root, on_select=self._on_select)

    @property
    def layout(self):
        return self.renderer.layout

    def _on_select(self, event: SelectionEvent) -> None:
        self.panel.open(event.member)

    def click(self, screen_x: float, screen_y: float) -> Optional[SelectionEvent]:
        """Click in screen space: undo the viewport transform, then hit-test."""
        return self.renderer.click(self.viewport.to_logical((screen_x, screen_y)))

    def select(self, member_id: str) -> Optional[SelectionEvent]:
        return self.renderer.select(member_id)

    def snapshot(self) -> dict[str, Any]:
        return {
            "viewId": self.view_id,
            "treeId": self.tree_id,
            "viewport": self.viewport.snapshot(),
            "panel": self.panel.snapshot(),
        }


def _close_view(view: TreeView) -> None:
    view.panel.close()


class ViewRegistry:
    def __init__(self, executor: Executor, fetch: DetailFetcher, ttl: int = 1800, max_items: int = 500,
                 viewport_factory=ViewportController):
        self.executor = executor
        self.fetch = fetch
        self.viewport_factory = viewport_factory
        self._views = TTLCache(ttl=ttl, max_items=max_items, on_evict=_close_view)

    def create(self, tree_id: str, root: TreeNode) -> TreeView:
        view = TreeView(tree_id, root, self.fetch, self.executor, viewport=self.viewport_factory())
        self._views.set(view.view_id, view)
        return view

    def get(self, view_id: str) -> Optional[TreeView]:
        return self._views.get(view_id)

    def discard(self, view_id: str) -> Optional[TreeView]:
        view = self._views.pop(view_id)
        if view is not None:
            _close_view(view)
        return view

    def __len__(self):
        return len(self._views)
