# apps/web/silsilah/infra/backend/api_client.py
from __future__ import annotations
import os
import logging
from typing import Any, Callable, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ...models import ApiResponse, FamilyTreeData, MemberDetail
from .errors import MalformedResponse, NetworkFailure, NotFound

log = logging.getLogger(__name__)

# ========= Config =========

API_BASE_URL = os.getenv("SILSILAH_API_BASE_URL", "http://localhost:8000")
API_VERSION = os.getenv("SILSILAH_API_VERSION", "v1")
DEFAULT_TIMEOUT = float(os.getenv("SILSILAH_HTTP_TIMEOUT", "10"))

# HTTP session with retries
session_http = requests.Session()
retries = Retry(
    total=3,
    backoff_factor=0.3,
    status_forcelist=(429, 500, 502, 503, 504),
    allowed_methods=frozenset({"GET"}),
    raise_on_status=False,
)
adapter = HTTPAdapter(pool_connections=16, pool_maxsize=16, max_retries=retries)
session_http.mount("https://", adapter)
session_http.mount("http://", adapter)


# ========= Endpoints =========

def family_tree_url(tree_id: str, base_url: str | None = None, version: str | None = None) -> str:
    base = (base_url or API_BASE_URL).rstrip("/")
    return f"{base}/{version or API_VERSION}/family/tree/{tree_id}"


def family_member_url(member_id: str, base_url: str | None = None, version: str | None = None) -> str:
    base = (base_url or API_BASE_URL).rstrip("/")
    return f"{base}/{version or API_VERSION}/family/member/{member_id}"


# ========= Requests =========

def _error_message(r: requests.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error")
        if msg:
            return f"HTTP error! status: {r.status_code} ({msg})"
    return f"HTTP error! status: {r.status_code}"


def _get_envelope(url: str, timeout: float | None = None) -> ApiResponse[Any]:
    """GET an endpoint and unwrap the APIResponse envelope."""
    headers = {"Accept": "application/json", "User-Agent": "silsilah/1.0"}
    try:
        r = session_http.get(url, headers=headers, timeout=timeout or DEFAULT_TIMEOUT)
    except requests.RequestException as ex:
        log.warning("Backend request failed: %s %s", url, ex)
        raise NetworkFailure(f"{type(ex).__name__}: {ex}", url=url) from ex

    if r.status_code == 404:
        raise NotFound(_error_message(r), status=404, url=url)
    if not r.ok:
        log.warning("Backend answered %s for %s", r.status_code, url)
        raise NetworkFailure(_error_message(r), status=r.status_code, url=url)

    try:
        body = r.json()
    except ValueError as ex:
        log.error("Backend sent a non-JSON body for %s: %s", url, (r.text or "")[:200])
        raise MalformedResponse("Malformed response body", status=r.status_code, url=url) from ex
    if not isinstance(body, dict) or "data" not in body:
        raise MalformedResponse("Response envelope without data", status=r.status_code, url=url)

    try:
        code = int(body.get("code") or r.status_code)
    except (TypeError, ValueError) as ex:
        log.error("Backend sent a non-numeric envelope code for %s: %r", url, body.get("code"))
        raise MalformedResponse("Response envelope with invalid code", status=r.status_code, url=url) from ex

    return ApiResponse(
        code=code,
        message=str(body.get("message") or ""),
        data=body.get("data"),
        timestamp=body.get("timestamp"),
        version=body.get("version"),
    )


def _parse(envelope: ApiResponse[Any], parser: Callable[[Dict[str, Any]], Any], url: str) -> Any:
    try:
        return parser(envelope.data)
    except (TypeError, ValueError) as ex:
        log.error("Invalid payload from %s: %s", url, ex)
        raise MalformedResponse(f"Malformed response body: {ex}", status=envelope.code, url=url) from ex


def get_family_tree(tree_id: str, base_url: str | None = None, timeout: float | None = None) -> Optional[FamilyTreeData]:
    """
    Fetch the flat member list of a tree.

    Returns None when the backend answers with an empty `data`; raises
    BackendError subclasses on failure.
    """
    url = family_tree_url(tree_id, base_url)
    envelope = _get_envelope(url, timeout)
    if envelope.data is None:
        return None
    return _parse(envelope, FamilyTreeData.from_dict, url)


def get_member_detail(member_id: str, base_url: str | None = None, timeout: float | None = None) -> MemberDetail:
    url = family_member_url(member_id, base_url)
    envelope = _get_envelope(url, timeout)
    if envelope.data is None:
        raise NotFound("Member not found", status=envelope.code, url=url)
    return _parse(envelope, MemberDetail.from_dict, url)
