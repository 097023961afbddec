"""Seed dev data from scripts/seed-data.json.

Creates the schema if needed, then loads tenants (by code; created if
missing), org units, categories, category relationships and classified
entities. Rows with "tenant_code": null are shared templates. Tenants, org
units, categories and relationships that already exist are skipped;
entities are added on every run.

Usage:
    uv run python -m scripts.seed_dev_data [path/to/seed-data.json]

Default path: scripts/seed-data.json (relative to project root).
Uses DATABASE_URL from the environment or .env (defaults to local SQLite).
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from app.application.dtos.org_unit import OrgUnitCreate
from app.application.use_cases.categories import (
    CategoryRelationshipService,
    CategoryService,
)
from app.application.use_cases.org_units import OrgUnitService
from app.domain.enums import TenantStatus
from app.domain.exceptions import (
    DuplicateNameException,
    DuplicateRelationshipException,
)
from app.infrastructure.persistence import database as db_mod
from app.infrastructure.persistence.repositories import (
    CategoryRelationshipRepository,
    CategoryRepository,
    ClassifiedEntityRepository,
    OrgUnitRepository,
    TenantRepository,
)

Key = tuple[str | None, str]


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


def _lookup(ids: dict[Key, str], tenant_id: str | None, name: str) -> str | None:
    """Resolve a name in the tenant's scope first, then among templates."""
    return ids.get((tenant_id, name)) or ids.get((None, name))


async def run(path: Path) -> None:
    _load_env()
    if not path.exists():
        print(f"Seed file not found: {path}", file=sys.stderr)
        sys.exit(1)
    with path.open(encoding="utf-8") as f:
        data = json.load(f)

    await db_mod.create_schema()
    session_factory = db_mod._ensure_engine()

    async with session_factory() as session:
        async with session.begin():
            tenant_repo = TenantRepository(session)
            tenant_ids: dict[str | None, str | None] = {None: None}
            for t in data.get("tenants", []):
                existing = await tenant_repo.get_by_code(t["code"])
                tenant = existing or await tenant_repo.create_tenant(
                    code=t["code"],
                    name=t["name"],
                    status=TenantStatus(t.get("status", "active")),
                )
                tenant_ids[t["code"]] = tenant.id
                print(f"Tenant {t['code']} -> {tenant.id}")

            unit_ids: dict[Key, str] = {}
            for u in data.get("org_units", []):
                tenant_id = tenant_ids[u.get("tenant_code")]
                repo = OrgUnitRepository(session, tenant_id)
                parent_id = _lookup(unit_ids, tenant_id, u["parent"]) if u.get("parent") else None
                try:
                    unit = await OrgUnitService(repo).create_unit(
                        OrgUnitCreate(
                            name=u["name"],
                            short_code=u.get("short_code"),
                            description=u.get("description"),
                            parent_id=parent_id,
                        )
                    )
                    print(f"  Org unit {u['name']} (level {unit.hierarchy_level})")
                except DuplicateNameException:
                    unit = await repo.get_by_name(u["name"])
                    print(f"  Org unit {u['name']} already exists, skip")
                unit_ids[(tenant_id, u["name"])] = unit.id

            category_ids: dict[Key, str] = {}
            for c in data.get("categories", []):
                tenant_id = tenant_ids[c.get("tenant_code")]
                category_repo = CategoryRepository(session, tenant_id)
                service = CategoryService(
                    category_repo, CategoryRelationshipRepository(session, tenant_id)
                )
                try:
                    category = await service.create_category(
                        c["name"], c["entity_category"], description=c.get("description")
                    )
                    print(f"  Category {c['name']} ({c['entity_category']})")
                except DuplicateNameException:
                    category = await category_repo.get_by_name(c["name"], c["entity_category"])
                    print(f"  Category {c['name']} already exists, skip")
                category_ids[(tenant_id, c["name"])] = category.id

            for r in data.get("relationships", []):
                tenant_id = tenant_ids[r.get("tenant_code")]
                service = CategoryRelationshipService(
                    CategoryRepository(session, tenant_id),
                    CategoryRelationshipRepository(session, tenant_id),
                    ClassifiedEntityRepository(session, tenant_id),
                )
                try:
                    result = await service.add_parent(
                        _lookup(category_ids, tenant_id, r["parent"]),
                        _lookup(category_ids, tenant_id, r["child"]),
                    )
                    primary = result.relationship.is_primary if result.relationship else False
                    print(f"  {r['parent']} -> {r['child']} (primary={primary})")
                except DuplicateRelationshipException:
                    print(f"  {r['parent']} -> {r['child']} already exists, skip")

            for e in data.get("entities", []):
                tenant_id = tenant_ids[e["tenant_code"]]
                placement = e.get("placement_parent")
                entity_id = await ClassifiedEntityRepository(session, tenant_id).create_entity(
                    e["name"],
                    _lookup(category_ids, tenant_id, e["category"]),
                    placement_parent_id=(
                        _lookup(category_ids, tenant_id, placement) if placement else None
                    ),
                )
                print(f"  Entity {e['name']} -> {entity_id}")
    print("Seed completed.")


def main() -> None:
    root = _project_root()
    path_arg = sys.argv[1] if len(sys.argv) > 1 else None
    path = Path(path_arg) if path_arg else root / "scripts" / "seed-data.json"
    if not path.is_absolute():
        path = (root / path).resolve()
    asyncio.run(run(path))


if __name__ == "__main__":
    main()
