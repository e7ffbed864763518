# apps/web/silsilah/api/routes_mock_backend.py
# Local stand-in for the family backend, registered only with SILSILAH_MOCK_BACKEND=1.
from __future__ import annotations
import json
import pathlib
from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, jsonify

mock_backend_bp = Blueprint("mock_backend", __name__)

DATA_FILE = pathlib.Path(__file__).resolve().parent.parent / "data" / "family-tree.json"
API_VERSION_LABEL = "1.0.0"

_cache: Dict[str, Any] = {}


def _load() -> Dict[str, Any]:
    if "tree" not in _cache:
        _cache["tree"] = json.loads(DATA_FILE.read_text(encoding="utf-8"))
    return _cache["tree"]


def _envelope(data: Any, code: int = 200, message: str = "OK"):
    return jsonify({
        "code": code,
        "message": message,
        "data": data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION_LABEL,
    }), code


@mock_backend_bp.get("/v1/family/tree/<tree_id>")
def mock_tree(tree_id: str):
    tree = _load()
    members = [{k: v for k, v in m.items() if k != "detail"} for m in tree["members"]]
    return _envelope({"members": members, "rootId": tree["rootId"]})


@mock_backend_bp.get("/v1/family/member/<member_id>")
def mock_member(member_id: str):
    member = next((m for m in _load()["members"] if str(m["id"]) == member_id), None)
    if member is None:
        return _envelope(None, code=404, message="Member not found")
    return _envelope({
        "id": member["id"],
        "fullname": member["fullname"],
        "nickname": member.get("nickname"),
        "gender": member["gender"],
        "birth_date": member.get("birthDate"),
        "death_date": member.get("deathDate"),
        "photo_url": member.get("photoUrl"),
        "bio": member.get("bio"),
        "detail": {
            "profession": (member.get("detail") or {}).get("profession"),
            "domicile": member.get("domicile"),
            "full_address": (member.get("detail") or {}).get("full_address"),
            "whatsapp_number": (member.get("detail") or {}).get("whatsapp_number"),
        },
    })
