# apps/web/silsilah/api/routes_view.py
from __future__ import annotations
import math
from typing import Any, Callable, Dict, Tuple

from flask import Blueprint, current_app, jsonify, request

from ..services.viewport import ViewportController


view_bp = Blueprint("view", __name__)


def _number(value: Any) -> float:
    n = float(value)
    if not math.isfinite(n):
        raise ValueError(f"non-finite number {value!r}")
    return n


def _point(body: Dict[str, Any]) -> Tuple[float, float]:
    return _number(body.get("x", 0)), _number(body.get("y", 0))


# action name -> how it drives the controller
_VIEWPORT_ACTIONS: Dict[str, Callable[[ViewportController, Dict[str, Any]], Any]] = {
    "wheel":        lambda vp, b: vp.wheel(_point(b), _number(b.get("deltaY", 0))),
    "pinch":        lambda vp, b: vp.pinch(_point(b), int(b.get("direction", 0))),
    "double_click": lambda vp, b: vp.double_click(_point(b)),
    "press":        lambda vp, b: vp.press(_point(b), int(b.get("button", 0))),
    "move":         lambda vp, b: vp.move(_point(b)),
    "release":      lambda vp, b: vp.release(),
    "leave":        lambda vp, b: vp.leave(),
    "cancel":       lambda vp, b: vp.cancel(),
    "zoom_in":      lambda vp, b: vp.zoom_in(),
    "zoom_out":     lambda vp, b: vp.zoom_out(),
    "reset":        lambda vp, b: vp.reset(),
}


def _get_view(view_id: str):
    return current_app.extensions["silsilah.views"].get(view_id)


def _view_gone():
    return jsonify({"ok": False, "error": "view_not_found", "msg": "Reload the page"}), 404


@view_bp.post("/api/view/<view_id>/viewport")
def viewport_action(view_id: str):
    view = _get_view(view_id)
    if view is None:
        return _view_gone()

    body = request.get_json(silent=True) or {}
    action = _VIEWPORT_ACTIONS.get(body.get("action") or "")
    if action is None:
        return jsonify({"ok": False, "error": "unknown_action", "action": body.get("action")}), 400

    with view.lock:
        try:
            action(view.viewport, body)
        except (TypeError, ValueError):
            # a failed move must not leave the page stuck in a drag
            view.viewport.release()
            return jsonify({"ok": False, "error": "bad_coordinates"}), 400
        return jsonify({"ok": True, "viewport": view.viewport.snapshot()}), 200


@view_bp.post("/api/view/<view_id>/select")
def select(view_id: str):
    view = _get_view(view_id)
    if view is None:
        return _view_gone()

    body = request.get_json(silent=True) or {}
    member_id = body.get("memberId")
    if member_id is not None and member_id != "":
        event = view.select(str(member_id))
    else:
        try:
            x, y = _point(body)
        except (TypeError, ValueError):
            return jsonify({"ok": False, "error": "bad_coordinates"}), 400
        with view.lock:
            event = view.click(x, y)

    if event is None:
        return jsonify({"ok": False, "error": "no_member"}), 404
    return jsonify({"ok": True, "memberId": event.member_id, "panel": view.panel.snapshot()}), 200


@view_bp.get("/api/view/<view_id>/panel")
def panel_state(view_id: str):
    view = _get_view(view_id)
    if view is None:
        return _view_gone()
    return jsonify({"ok": True, "panel": view.panel.snapshot()}), 200


@view_bp.post("/api/view/<view_id>/panel/retry")
def panel_retry(view_id: str):
    view = _get_view(view_id)
    if view is None:
        return _view_gone()
    if view.panel.retry() is None:
        return jsonify({"ok": False, "error": "nothing_to_retry", "panel": view.panel.snapshot()}), 409
    return jsonify({"ok": True, "panel": view.panel.snapshot()}), 200


@view_bp.post("/api/view/<view_id>/panel/close")
def panel_close(view_id: str):
    view = _get_view(view_id)
    if view is None:
        return _view_gone()
    view.panel.close()
    return jsonify({"ok": True, "panel": view.panel.snapshot()}), 200


@view_bp.post("/api/view/<view_id>/close")
def view_close(view_id: str):
    """The page is going away; drop its view and any pending detail request."""
    view = current_app.extensions["silsilah.views"].discard(view_id)
    if view is None:
        return _view_gone()
    return jsonify({"ok": True, "viewId": view_id}), 200
