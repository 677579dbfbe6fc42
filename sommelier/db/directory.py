from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging
import os
import tempfile

from sommelier.core.config import settings
from sommelier.core.errors import StaleMenuError
from sommelier.schemas.tenant import Tenant

logger = logging.getLogger(__name__)


class TenantNotFoundError(LookupError):
    pass


class TenantDirectory(ABC):
    """
    Keyed tenant store. Implementations report store failures by raising;
    a missing tenant is ``None`` on lookups and TenantNotFoundError on writes.
    """

    @abstractmethod
    async def find_by_access_code(self, code: str) -> Optional[Tenant]:
        pass

    @abstractmethod
    async def get_by_id(self, tenant_id: str) -> Optional[Tenant]:
        pass

    @abstractmethod
    async def replace_menu(self, tenant_id: str, menu: List[Dict[str, Any]],
                           expected_version: Optional[int] = None) -> int:
        """Replace the whole menu document. Returns the new menu version."""
        pass

    @abstractmethod
    async def upsert(self, tenant: Tenant) -> None:
        pass


class InMemoryTenantDirectory(TenantDirectory):
    def __init__(self, tenants: Optional[List[Tenant]] = None):
        self._tenants: Dict[str, Tenant] = {}
        for tenant in tenants or []:
            self._tenants[tenant.id] = tenant.model_copy(deep=True)

    async def find_by_access_code(self, code: str) -> Optional[Tenant]:
        for tenant in self._tenants.values():
            if tenant.access_code == code:
                return tenant.model_copy(deep=True)
        return None

    async def get_by_id(self, tenant_id: str) -> Optional[Tenant]:
        tenant = self._tenants.get(tenant_id)
        return tenant.model_copy(deep=True) if tenant else None

    async def replace_menu(self, tenant_id: str, menu: List[Dict[str, Any]],
                           expected_version: Optional[int] = None) -> int:
        tenant = self._tenants.get(tenant_id)
        if tenant is None:
            raise TenantNotFoundError(tenant_id)
        if expected_version is not None and expected_version != tenant.menu_version:
            raise StaleMenuError(expected_version, tenant.menu_version)
        new_version = tenant.menu_version + 1
        self._tenants[tenant_id] = tenant.model_copy(
            update={"menu": json.loads(json.dumps(menu)), "menu_version": new_version}
        )
        return new_version

    async def upsert(self, tenant: Tenant) -> None:
        self._tenants[tenant.id] = tenant.model_copy(deep=True)


class JsonFileTenantDirectory(TenantDirectory):
    """
    File layout::

        <data_dir>/tenants.json          list of tenant records
        <data_dir>/menus/<tenant id>.json  {"menu": [...], "version": n}
        <data_dir>/menus/demo.json       served to tenants without a menu file
    """

    DEMO_MENU = "demo"

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self.tenants_file = self.data_dir / "tenants.json"
        self.menus_dir = self.data_dir / "menus"

    def _read_json(self, path: Path) -> Any:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)

    def _write_json(self, path: Path, payload: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _load_records(self) -> List[Dict[str, Any]]:
        if not self.tenants_file.exists():
            return []
        return self._read_json(self.tenants_file)

    def _menu_path(self, tenant_id: str) -> Path:
        return self.menus_dir / f"{tenant_id}.json"

    def _load_menu(self, tenant_id: str) -> Dict[str, Any]:
        path = self._menu_path(tenant_id)
        if not path.exists():
            logger.info(f"No menu file for tenant {tenant_id}, serving demo menu")
            demo_path = self._menu_path(self.DEMO_MENU)
            if not demo_path.exists():
                return {"menu": [], "version": 0}
            # Nothing committed for this tenant yet; the demo version does not apply.
            return {"menu": self._read_json(demo_path).get("menu"), "version": 0}
        document = self._read_json(path)
        return {"menu": document.get("menu"), "version": document.get("version", 0)}

    def _to_tenant(self, record: Dict[str, Any]) -> Tenant:
        document = self._load_menu(record["id"])
        return Tenant(
            id=record["id"],
            name=record["name"],
            access_code=record["accessCode"],
            theme=record.get("theme") or {},
            menu=document["menu"],
            menu_version=document["version"],
        )

    async def find_by_access_code(self, code: str) -> Optional[Tenant]:
        for record in self._load_records():
            if record.get("accessCode") == code:
                return self._to_tenant(record)
        return None

    async def get_by_id(self, tenant_id: str) -> Optional[Tenant]:
        for record in self._load_records():
            if record.get("id") == tenant_id:
                return self._to_tenant(record)
        return None

    async def replace_menu(self, tenant_id: str, menu: List[Dict[str, Any]],
                           expected_version: Optional[int] = None) -> int:
        if not any(r.get("id") == tenant_id for r in self._load_records()):
            raise TenantNotFoundError(tenant_id)
        path = self._menu_path(tenant_id)
        current_version = self._read_json(path).get("version", 0) if path.exists() else 0
        if expected_version is not None and expected_version != current_version:
            raise StaleMenuError(expected_version, current_version)
        new_version = current_version + 1
        self._write_json(path, {"menu": menu, "version": new_version})
        return new_version

    async def upsert(self, tenant: Tenant) -> None:
        records = [r for r in self._load_records() if r.get("id") != tenant.id]
        records.append({
            "id": tenant.id,
            "name": tenant.name,
            "accessCode": tenant.access_code,
            "theme": tenant.theme,
        })
        self._write_json(self.tenants_file, records)
        self._write_json(self._menu_path(tenant.id), {"menu": tenant.menu, "version": tenant.menu_version})


_default_directory: Optional[TenantDirectory] = None


def get_directory() -> TenantDirectory:
    """FastAPI dependency: the directory configured by settings."""
    global _default_directory
    if _default_directory is None:
        if settings.DIRECTORY_BACKEND == "file":
            _default_directory = JsonFileTenantDirectory(settings.DATA_DIR)
        else:
            _default_directory = InMemoryTenantDirectory()
        logger.info(f"Tenant directory backend: {settings.DIRECTORY_BACKEND}")
    return _default_directory
