# apps/web/silsilah/api/routes_tree.py
from __future__ import annotations
import logging
from flask import Blueprint, current_app, jsonify, render_template, url_for

from ..infra.backend import api_client
from ..infra.backend.errors import BackendError, NotFound
from ..services.tree_builder import build_tree, depth_mismatches, relationship_label

log = logging.getLogger(__name__)

tree_bp = Blueprint("tree", __name__)


def _fetch_root(tree_id: str):
    """Fetch a tree and build it; returns (root_or_None, data_or_None)."""
    cfg = current_app.config
    data = api_client.get_family_tree(tree_id, base_url=cfg["API_BASE_URL"], timeout=cfg["HTTP_TIMEOUT"])
    if data is None:
        return None, None
    return build_tree(data.root_id, data.members), data


@tree_bp.get("/")
def index():
    return tree_page(current_app.config["TREE_ID"])


@tree_bp.get("/tree/<tree_id>")
def tree_page(tree_id: str):
    retry_url = url_for("tree.tree_page", tree_id=tree_id)
    try:
        root, _ = _fetch_root(tree_id)
    except BackendError as ex:
        log.error("Family tree %s could not be loaded: %s (status=%s)", tree_id, ex, ex.status)
        code = 404 if isinstance(ex, NotFound) else 502
        return render_template("message.html", title="Oops! Something went wrong",
                               message=str(ex), retry_url=retry_url), code

    if root is None:
        return render_template("message.html", title="Family tree",
                               message="No family tree data available", retry_url=retry_url), 200

    for member, level in depth_mismatches(root):
        log.warning("Member %s has depth %s but sits at level %s (%s)",
                    member.id, member.depth, level, relationship_label(level))

    view = current_app.extensions["silsilah.views"].create(tree_id, root)
    return render_template("tree.html", view=view, layout=view.layout, viewport=view.viewport)


@tree_bp.get("/api/tree/<tree_id>")
def tree_json(tree_id: str):
    try:
        root, data = _fetch_root(tree_id)
    except BackendError as ex:
        code = 404 if isinstance(ex, NotFound) else 502
        return jsonify({"ok": False, "error": str(ex), "status": ex.status}), code

    return jsonify({
        "ok": True,
        "treeId": tree_id,
        "rootId": data.root_id if data else None,
        "tree": root.to_dict() if root else None,
    }), 200
