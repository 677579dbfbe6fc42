from datetime import datetime, timedelta, timezone
from pydantic import ValidationError
from typing import Optional
import json
import logging

from sommelier.core.config import settings
from sommelier.core.errors import SessionCorruptionError
from sommelier.db.storage import KeyValueStore
from sommelier.schemas.menu import RestaurantData
from sommelier.schemas.session import SessionData
from sommelier.schemas.tenant import TenantSnapshot

logger = logging.getLogger(__name__)


class SessionCache:
    """
    Remembers the logged-in tenant and its menu across reloads.

    The whole session lives under a single key and every save overwrites it.
    A stored value that is not a structurally valid session is deleted on
    read and reported as "no session"; load() never raises.
    """

    def __init__(self, store: KeyValueStore, key: Optional[str] = None,
                 ttl_seconds: Optional[int] = None):
        self.store = store
        self.key = key or settings.SESSION_KEY
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.SESSION_TTL_SECONDS

    def save(self, session: SessionData) -> None:
        self.store.set(self.key, session.model_dump_json(by_alias=True).encode("utf-8"))

    def start(self, snapshot: TenantSnapshot) -> SessionData:
        session = SessionData(
            tenant_id=snapshot.tenant_id,
            display_name=snapshot.display_name,
            menu_data=RestaurantData(menu=snapshot.menu),
            menu_version=snapshot.menu_version,
        )
        self.save(session)
        return session

    def load(self) -> Optional[SessionData]:
        try:
            raw = self.store.get(self.key)
        except OSError as e:
            logger.warning(f"Session store unreadable, treating as no session: {e!r}")
            return None
        if raw is None:
            return None

        try:
            session = self._decode(raw)
        except SessionCorruptionError as e:
            logger.warning(f"Invalid session structure detected, clearing session: {e}")
            self.clear()
            return None

        if self._expired(session):
            logger.info(f"Session for tenant {session.tenant_id} expired")
            self.clear()
            return None
        return session

    def clear(self) -> None:
        self.store.delete(self.key)

    def _decode(self, raw: bytes) -> SessionData:
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SessionCorruptionError(f"unreadable session: {e}") from e

        menu_data = payload.get("menuData") if isinstance(payload, dict) else None
        if not isinstance(menu_data, dict) or not isinstance(menu_data.get("menu"), list):
            raise SessionCorruptionError("menuData.menu is not a list")

        try:
            return SessionData.model_validate(payload)
        except ValidationError as e:
            raise SessionCorruptionError(f"{e.error_count()} invalid field(s)") from e

    def _expired(self, session: SessionData) -> bool:
        if self.ttl_seconds is None:
            return False
        saved_at = session.saved_at
        if saved_at.tzinfo is None:
            saved_at = saved_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) - saved_at > timedelta(seconds=self.ttl_seconds)
