# apps/web/silsilah/main.py
# Run with: flask --app silsilah.main:create_app run

import os
import atexit
import logging
from concurrent.futures import ThreadPoolExecutor

from dotenv import load_dotenv
from flask import Flask

from .infra.backend import api_client
from .services.view_sessions import ViewRegistry

log = logging.getLogger(__name__)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def create_app(overrides: dict | None = None):
    load_dotenv()

    # 'web' holds the templates, 'static' the canvas script and styles
    app = Flask(__name__, template_folder="web", static_folder="static")

    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "dev-secret-key")
    app.config["API_BASE_URL"] = os.getenv("SILSILAH_API_BASE_URL", api_client.API_BASE_URL)
    app.config["TREE_ID"] = os.getenv("SILSILAH_TREE_ID", "16")
    app.config["HTTP_TIMEOUT"] = float(os.getenv("SILSILAH_HTTP_TIMEOUT", str(api_client.DEFAULT_TIMEOUT)))
    app.config["VIEW_TTL"] = int(os.getenv("SILSILAH_VIEW_TTL", "1800"))
    app.config["DETAIL_WORKERS"] = int(os.getenv("SILSILAH_DETAIL_WORKERS", "4"))
    app.config["MOCK_BACKEND"] = _env_flag("SILSILAH_MOCK_BACKEND")
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO").upper()
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    executor = ThreadPoolExecutor(max_workers=app.config["DETAIL_WORKERS"], thread_name_prefix="silsilah-detail")
    atexit.register(executor.shutdown, wait=False)

    def fetch_detail(member_id: str):
        return api_client.get_member_detail(
            member_id, base_url=app.config["API_BASE_URL"], timeout=app.config["HTTP_TIMEOUT"]
        )

    app.extensions["silsilah.executor"] = executor
    app.extensions["silsilah.views"] = ViewRegistry(executor, fetch_detail, ttl=app.config["VIEW_TTL"])

    # Blueprints
    from .api.routes_health import health_bp
    from .api.routes_tree import tree_bp
    from .api.routes_member import member_bp
    from .api.routes_view import view_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(tree_bp)
    app.register_blueprint(member_bp)
    app.register_blueprint(view_bp)

    if app.config["MOCK_BACKEND"]:
        from .api.routes_mock_backend import mock_backend_bp
        app.register_blueprint(mock_backend_bp)
        log.info("Serving the bundled sample backend under /v1/family")

    log.info("Family backend at %s", app.config["API_BASE_URL"])
    return app

