"""Bulk load tenants and their menus from static files into a tenant directory."""
from pathlib import Path
from pydantic import BaseModel, Field
from typing import List
import asyncio
import json
import logging

from sommelier.core.config import settings
from sommelier.core.errors import MenuValidationError
from sommelier.core.validation import menu_to_document, validate_menu
from sommelier.db.directory import TenantDirectory, get_directory
from sommelier.schemas.tenant import Tenant

logger = logging.getLogger(__name__)


class SeedFailure(BaseModel):
    tenant_id: str
    reason: str


class SeedReport(BaseModel):
    synced: List[str] = Field(default_factory=list)
    missing_menus: List[str] = Field(default_factory=list)
    failed: List[SeedFailure] = Field(default_factory=list)


async def seed_directory(source_dir: str, directory: TenantDirectory) -> SeedReport:
    """
    Push every tenant in ``<source_dir>/tenants.json`` into ``directory``.

    Menus come from ``<source_dir>/menus/<tenant id>.json``. A missing menu
    file gives the tenant an empty menu. A tenant whose record or menu is
    unusable is reported and skipped; the rest of the batch still runs.
    """
    source = Path(source_dir)
    report = SeedReport()

    logger.info(f"Reading {source / 'tenants.json'}")
    with open(source / "tenants.json", "r", encoding="utf-8") as fh:
        records = json.load(fh)

    for record in records:
        tenant_id = str(record.get("id", "?"))
        logger.info(f"Processing tenant: {record.get('name')} ({tenant_id})")
        try:
            menu_path = source / "menus" / f"{tenant_id}.json"
            menu = []
            if menu_path.exists():
                with open(menu_path, "r", encoding="utf-8") as fh:
                    document = json.load(fh)
                # Files hold the {"menu": [...]} wrapper
                menu = (document.get("menu") or []) if isinstance(document, dict) else document
            else:
                logger.warning(f"Menu file not found for {tenant_id}, using an empty menu")
                report.missing_menus.append(tenant_id)

            tenant = Tenant(
                id=record["id"],
                name=record["name"],
                access_code=record["accessCode"],
                theme=record.get("theme") or {},
                menu=menu_to_document(validate_menu(menu)),
            )
            await directory.upsert(tenant)
        except MenuValidationError as e:
            logger.error(f"Invalid menu for tenant {tenant_id}: {e}")
            report.failed.append(SeedFailure(tenant_id=tenant_id, reason=str(e)))
            continue
        except Exception as e:
            logger.exception(f"Error syncing tenant {tenant_id}")
            report.failed.append(SeedFailure(tenant_id=tenant_id, reason=repr(e)))
            continue

        logger.info(f"Successfully synced {tenant_id}")
        report.synced.append(tenant_id)

    logger.info(f"Seeding completed: {len(report.synced)} synced, {len(report.failed)} failed")
    return report


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=settings.LOG_LEVEL)
    source_dir = sys.argv[1] if len(sys.argv) > 1 else settings.DATA_DIR
    result = asyncio.run(seed_directory(source_dir, get_directory()))
    print(result.model_dump_json(indent=2))
