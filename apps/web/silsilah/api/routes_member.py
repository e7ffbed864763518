# apps/web/silsilah/api/routes_member.py
from __future__ import annotations
from flask import Blueprint, current_app, jsonify

from ..infra.backend import api_client
from ..infra.backend.errors import BackendError, NotFound

member_bp = Blueprint("member", __name__)


@member_bp.get("/api/member/<member_id>")
def member_detail(member_id: str):
    cfg = current_app.config
    try:
        detail = api_client.get_member_detail(member_id, base_url=cfg["API_BASE_URL"], timeout=cfg["HTTP_TIMEOUT"])
    except NotFound as ex:
        return jsonify({"ok": False, "error": "not_found", "msg": str(ex)}), 404
    except BackendError as ex:
        return jsonify({"ok": False, "error": "upstream_failed", "msg": str(ex), "status": ex.status}), 502
    return jsonify({"ok": True, "data": detail.to_dict()}), 200
