"""Per-person detail drawer with its own request lifecycle."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..infra.backend.errors import BackendError
from ..models import Member, MemberDetail
from . import formatting

log = logging.getLogger(__name__)

FALLBACK_ERROR = "Failed to load member details"

DetailFetcher = Callable[[str], MemberDetail]


class PanelStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


class DetailPanel:
    """
    Idle -> Loading -> (Success | Failed), reset to Idle on close.

    Every fetch is tagged with the generation current when it was issued.
    Opening another person, retrying or closing bumps the generation, so a
    late answer for an older request is dropped instead of committed.
    """

    def __init__(self, fetch: DetailFetcher, executor: Executor):
        self._fetch = fetch
        self._executor = executor
        # reentrant: a future that is already done runs its callback inside _issue
        self._lock = threading.RLock()
        self._generation = 0
        self.status = PanelStatus.IDLE
        self.person: Optional[Member] = None
        self.detail: Optional[MemberDetail] = None
        self.error: Optional[str] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_open(self) -> bool:
        return self.person is not None

    def open(self, person: Member) -> Future:
        """Show `person` and start fetching its detail record."""
        with self._lock:
            self.person = person
            return self._issue()

    def retry(self) -> Optional[Future]:
        """Re-issue the request for the current person after a failure."""
        with self._lock:
            if self.person is None or self.status is not PanelStatus.FAILED:
                return None
            return self._issue()

    def close(self) -> None:
        with self._lock:
            self._generation += 1
            self.status = PanelStatus.IDLE
            self.person = None
            self.detail = None
            self.error = None

    # ---- internals (called with the lock held)

    def _issue(self) -> Future:
        self._generation += 1
        generation = self._generation
        member_id = self.person.id
        self.status = PanelStatus.LOADING
        self.detail = None
        self.error = None

        future = self._executor.submit(self._fetch, member_id)
        future.add_done_callback(lambda f: self._commit(generation, member_id, f))
        return future

    def _commit(self, generation: int, member_id: str, future: Future) -> None:
        detail: Optional[MemberDetail] = None
        error: Optional[str] = None
        try:
            detail = future.result()
        except BackendError as ex:
            log.warning("Detail fetch for member %s failed: %s", member_id, ex)
            error = str(ex) or FALLBACK_ERROR
        except Exception:
            log.exception("Detail fetch for member %s crashed", member_id)
            error = FALLBACK_ERROR

        with self._lock:
            if generation != self._generation:
                log.debug("Stale detail response for member %s dropped (gen %s != %s)",
                          member_id, generation, self._generation)
                return
            if error is None:
                self.status, self.detail = PanelStatus.SUCCESS, detail
            else:
                self.status, self.error = PanelStatus.FAILED, error

    # ---- presentation

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            data: Dict[str, Any] = {
                "status": self.status.value,
                "open": self.person is not None,
                "personId": self.person.id if self.person else None,
                "error": self.error,
                "detail": None,
            }
            d = self.detail
        if d is not None:
            age = formatting.age_years(d.birth_date, d.death_date)
            data["detail"] = {
                "id": d.id,
                "fullname": d.fullname,
                "nickname": d.nickname,
                "initials": formatting.initials(d.fullname),
                "gender": d.gender.value,
                "genderLabel": formatting.gender_label(d.gender),
                "deceased": bool(d.death_date),
                "birthDate": formatting.format_date_id(d.birth_date),
                "age": f"({age} tahun)" if age is not None else "",
                "domicile": d.domicile or "-",
                "fullAddress": d.full_address or "-",
                "whatsappNumber": d.whatsapp_number or "-",
                "whatsappLink": formatting.whatsapp_link(d.whatsapp_number),
                "profession": d.profession or "-",
                "photoUrl": d.photo_url,
                "bio": d.bio,
            }
        return data
