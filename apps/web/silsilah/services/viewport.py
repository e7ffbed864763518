"""Pan and zoom state for a rendered tree."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, NamedTuple


PRIMARY_BUTTON = 0


class Point(NamedTuple):
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":  # type: ignore[override]
        return Point(self.x + other[0], self.y + other[1])

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other[0], self.y - other[1])

    def scaled(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)


ORIGIN = Point(0.0, 0.0)


class Mode(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class ViewportState:
    scale: float = 1.0
    offset: Point = field(default=ORIGIN)


class ViewportController:
    """
    Owns the viewport of one tree view and turns gestures into state updates.

    Screen coordinates relate to logical layout coordinates through
    `screen = offset + scale * logical`.
    """

    def __init__(
        self,
        min_zoom: float = 0.3,
        max_zoom: float = 2.0,
        zoom_step: float = 0.1,
        double_click_step: float = 0.3,
        state: ViewportState | None = None,
    ):
        if not 0 < min_zoom <= 1.0 <= max_zoom:
            raise ValueError(f"zoom bounds must satisfy 0 < min <= 1 <= max, got {min_zoom}..{max_zoom}")
        if zoom_step <= 0 or double_click_step <= 0:
            raise ValueError("zoom steps must be positive")
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.zoom_step = zoom_step
        self.double_click_step = double_click_step
        self.state = state or ViewportState()
        self.state.scale = self._clamp(self.state.scale)
        self.mode = Mode.IDLE
        self._drag_anchor: Point | None = None

    # ---- helpers

    def _clamp(self, scale: float) -> float:
        # rounding keeps repeated 0.1 steps from drifting past the bounds
        return min(self.max_zoom, max(self.min_zoom, round(scale, 6)))

    def _zoom_at(self, point: Point, new_scale: float) -> None:
        old_scale = self.state.scale
        new_scale = self._clamp(new_scale)
        if new_scale == old_scale:
            return
        p = Point(*point)
        self.state.offset = p - (p - self.state.offset).scaled(new_scale / old_scale)
        self.state.scale = new_scale

    # ---- idle gestures

    def wheel(self, point: Point, delta_y: float) -> ViewportState:
        """One wheel notch; negative delta zooms in, anchored at `point`."""
        if self.mode is Mode.DRAGGING or delta_y == 0:
            return self.state
        step = self.zoom_step if delta_y < 0 else -self.zoom_step
        self._zoom_at(point, self.state.scale + step)
        return self.state

    def pinch(self, point: Point, direction: int) -> ViewportState:
        """Pinch-out (direction > 0) zooms in one step around the pinch center."""
        return self.wheel(point, -direction)

    def double_click(self, point: Point) -> ViewportState:
        if self.mode is Mode.DRAGGING:
            return self.state
        self._zoom_at(point, self.state.scale + self.double_click_step)
        return self.state

    # ---- dragging

    def press(self, point: Point, button: int = PRIMARY_BUTTON) -> ViewportState:
        if button != PRIMARY_BUTTON:
            return self.state
        self.mode = Mode.DRAGGING
        self._drag_anchor = Point(*point) - self.state.offset
        return self.state

    def move(self, point: Point) -> ViewportState:
        if self.mode is Mode.DRAGGING and self._drag_anchor is not None:
            self.state.offset = Point(*point) - self._drag_anchor
        return self.state

    def release(self) -> ViewportState:
        self.mode = Mode.IDLE
        self._drag_anchor = None
        return self.state

    # pointer left the canvas or was lost: same exit as a release
    leave = release
    cancel = release

    @contextmanager
    def drag(self, point: Point) -> Iterator["ViewportController"]:
        """Drag session that always ends in IDLE, even when the body raises."""
        self.press(point)
        try:
            yield self
        finally:
            self.release()

    # ---- buttons

    def zoom_in(self) -> ViewportState:
        self.state.scale = self._clamp(self.state.scale + self.zoom_step)
        return self.state

    def zoom_out(self) -> ViewportState:
        self.state.scale = self._clamp(self.state.scale - self.zoom_step)
        return self.state

    def reset(self) -> ViewportState:
        self.release()
        self.state.scale = 1.0
        self.state.offset = ORIGIN
        return self.state

    # ---- projection

    def to_logical(self, point: Point) -> Point:
        return (Point(*point) - self.state.offset).scaled(1.0 / self.state.scale)

    def to_screen(self, point: Point) -> Point:
        return Point(*point).scaled(self.state.scale) + self.state.offset

    def transform(self) -> str:
        """translate(offset) . scale(scale), usable as an SVG transform."""
        ox, oy = self.state.offset
        return f"translate({ox:g}, {oy:g}) scale({self.state.scale:g})"

    @property
    def cursor(self) -> str:
        return "grabbing" if self.mode is Mode.DRAGGING else "grab"

    @property
    def zoom_percent(self) -> int:
        return int(round(self.state.scale * 100))

    @property
    def can_zoom_in(self) -> bool:
        return self.state.scale < self.max_zoom

    @property
    def can_zoom_out(self) -> bool:
        return self.state.scale > self.min_zoom

    def snapshot(self) -> Dict[str, Any]:
        ox, oy = self.state.offset
        return {
            "scale": self.state.scale,
            "offset": {"x": ox, "y": oy},
            "mode": self.mode.value,
            "transform": self.transform(),
            "cursor": self.cursor,
            "zoomPercent": self.zoom_percent,
            "canZoomIn": self.can_zoom_in,
            "canZoomOut": self.can_zoom_out,
        }
