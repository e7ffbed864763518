from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.get("/healthz")
def healthz():
    views = current_app.extensions["silsilah.views"]
    return jsonify({"status": "ok", "views": len(views)}), 200
