"""
Survey responses and login audit records.

Both collections are append‑only.  Survey responses are free‑form
objects; the server only stamps a ``timestamp``.  Login records are
rebuilt from scratch with three whitelisted fields so that nothing a
client sends, a password in particular, can reach the file.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from ..core.errors import ValidationError
from ..core.store import LOGINS, RESPONSES, Record, RecordStore
from ..schemas.survey import LoginRecord

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SurveyService:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def save_response(self, payload: Mapping[str, Any]) -> Record:
        """Append a survey response, overwriting any client ``timestamp``."""
        if not isinstance(payload, Mapping):
            raise ValidationError("Survey response must be a JSON object")
        record: Dict[str, Any] = dict(payload)
        record["timestamp"] = _now_iso()
        self.store.append(RESPONSES, record)
        logger.info("Stored survey response")
        return record

    def save_login(self, payload: Mapping[str, Any]) -> Record:
        """Append a login audit record built from ``username`` and ``avatarUrl`` only."""
        if not isinstance(payload, Mapping):
            raise ValidationError("Login record must be a JSON object")
        entry = LoginRecord(
            username=str(payload.get("username") or "").strip(),
            avatar_url=str(payload.get("avatarUrl") or ""),
            timestamp=_now_iso(),
        )
        record = entry.model_dump(by_alias=True)
        self.store.append(LOGINS, record)
        logger.info("Stored login record for %s", entry.username or "<anonymous>")
        return record

    def list_responses(self) -> List[Record]:
        return self.store.load(RESPONSES)

    def list_logins(self) -> List[Record]:
        return self.store.load(LOGINS)

    def export(self) -> Dict[str, List[Record]]:
        """Return both collections for download."""
        return {"responses": self.list_responses(), "logins": self.list_logins()}
