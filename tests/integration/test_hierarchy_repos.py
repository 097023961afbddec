"""Org unit, category and relationship repositories against in-memory SQLite.

Covers tenant scoping with shared templates and the database constraints
behind the one-primary-per-child rule.
"""

import pytest

from app.application.dtos.org_unit import OrgUnitCreate, OrgUnitUpdate
from app.application.use_cases.categories import CategoryService
from app.domain.enums import VisibilityScope
from app.domain.exceptions import ReadOnlyTemplateException, RelationshipConflictException
from app.infrastructure.persistence.repositories import (
    CategoryRelationshipRepository,
    CategoryRepository,
    ClassifiedEntityRepository,
    OrgUnitRepository,
    TenantRepository,
)


@pytest.fixture
async def tenant_ids(db_session) -> tuple[str, str]:
    repo = TenantRepository(db_session)
    acme = await repo.create_tenant(code="acme", name="Acme")
    globex = await repo.create_tenant(code="globex", name="Globex")
    return acme.id, globex.id


async def _categories(db_session, tenant_id, *names):
    repo = CategoryRepository(db_session, tenant_id)
    return [await repo.create_category(name, "asset") for name in names]


class TestTemplateScoping:
    async def test_tenant_sees_own_and_templates_only(self, db_session, tenant_ids) -> None:
        acme, globex = tenant_ids
        (template,) = await _categories(db_session, None, "Infrastructure")
        (own,) = await _categories(db_session, acme, "Pare-feu")
        await _categories(db_session, globex, "Serveurs")

        repo = CategoryRepository(db_session, acme)
        visible = {c.id for c in await repo.list_visible()}
        assert visible == {template.id, own.id}
        assert {c.id for c in await repo.list_visible(VisibilityScope.TENANT)} == {own.id}
        assert {c.id for c in await repo.list_visible(VisibilityScope.TEMPLATES)} == {
            template.id
        }

    async def test_template_admin_sees_templates_only(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        (template,) = await _categories(db_session, None, "Infrastructure")
        await _categories(db_session, acme, "Pare-feu")

        repo = CategoryRepository(db_session, None)
        assert [c.id for c in await repo.list_visible()] == [template.id]

    async def test_template_is_not_writable_by_tenant(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        (template,) = await _categories(db_session, None, "Infrastructure")

        repo = CategoryRepository(db_session, acme)
        assert await repo.get_by_id(template.id) is not None
        assert await repo.update_category(template.id, name="Renamed") is None
        assert await repo.delete_category(template.id) is False

    async def test_create_in_foreign_scope_rejected(self, db_session, tenant_ids) -> None:
        from app.infrastructure.persistence.models import Category

        acme, globex = tenant_ids
        repo = CategoryRepository(db_session, acme)
        with pytest.raises(ReadOnlyTemplateException):
            await repo.create(Category(tenant_id=globex, name="X", entity_category="asset"))

    async def test_other_tenant_cannot_see_category(self, db_session, tenant_ids) -> None:
        acme, globex = tenant_ids
        (own,) = await _categories(db_session, acme, "Pare-feu")
        assert await CategoryRepository(db_session, globex).get_by_id(own.id) is None


class TestRelationshipConstraints:
    async def test_second_primary_for_child_is_conflict(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        a, b, child = await _categories(db_session, acme, "A", "B", "Child")
        repo = CategoryRelationshipRepository(db_session, acme)
        await repo.create_relationship(a.id, child.id, is_primary=True)
        with pytest.raises(RelationshipConflictException):
            await repo.create_relationship(b.id, child.id, is_primary=True)

    async def test_duplicate_edge_is_conflict(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        a, child = await _categories(db_session, acme, "A", "Child")
        repo = CategoryRelationshipRepository(db_session, acme)
        await repo.create_relationship(a.id, child.id, is_primary=True)
        with pytest.raises(RelationshipConflictException):
            await repo.create_relationship(a.id, child.id, is_primary=False)

    async def test_promote_swaps_primary(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        infra, secu, pare_feu = await _categories(
            db_session, acme, "Infrastructure", "Sécurité Réseau", "Pare-feu"
        )
        repo = CategoryRelationshipRepository(db_session, acme)
        first = await repo.create_relationship(infra.id, pare_feu.id, is_primary=True)
        second = await repo.create_relationship(secu.id, pare_feu.id, is_primary=False)

        edges = await repo.promote_relationship(second.id, first.id)

        primary = {e.id: e.is_primary for e in edges}
        assert primary == {first.id: False, second.id: True}
        views = await repo.list_parent_views(pare_feu.id)
        assert [v.parent_name for v in views] == ["Infrastructure", "Sécurité Réseau"]
        assert [v.is_primary for v in views] == [False, True]

    async def test_promote_missing_relationship_is_conflict(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        repo = CategoryRelationshipRepository(db_session, acme)
        with pytest.raises(RelationshipConflictException):
            await repo.promote_relationship("missing", None)

    async def test_delete_relationship_reports_rowcount(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        a, child = await _categories(db_session, acme, "A", "Child")
        repo = CategoryRelationshipRepository(db_session, acme)
        edge = await repo.create_relationship(a.id, child.id, is_primary=True)
        assert await repo.delete_relationship(edge.id) is True
        assert await repo.delete_relationship(edge.id) is False

    async def test_parent_ids_batch(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        a, b, c = await _categories(db_session, acme, "A", "B", "C")
        repo = CategoryRelationshipRepository(db_session, acme)
        await repo.create_relationship(a.id, c.id, is_primary=True)
        await repo.create_relationship(b.id, c.id, is_primary=False)
        await repo.create_relationship(a.id, b.id, is_primary=True)

        assert await repo.list_parent_ids({b.id, c.id}) == {
            b.id: {a.id},
            c.id: {a.id, b.id},
        }
        assert await repo.list_parent_ids(set()) == {}


class TestCategoryQueries:
    async def test_roots_and_candidate_parents(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        a, b, child = await _categories(db_session, acme, "A", "B", "Child")
        await CategoryRelationshipRepository(db_session, acme).create_relationship(
            a.id, child.id, is_primary=True
        )
        repo = CategoryRepository(db_session, acme)

        assert [c.id for c in await repo.list_roots()] == [a.id, b.id]
        assert [c.id for c in await repo.list_candidate_parents(child.id)] == [b.id]

    async def test_delete_category_restores_child_primary(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        a, b, child = await _categories(db_session, acme, "A", "B", "Child")
        relationships = CategoryRelationshipRepository(db_session, acme)
        await relationships.create_relationship(a.id, child.id, is_primary=True)
        kept = await relationships.create_relationship(b.id, child.id, is_primary=False)
        service = CategoryService(CategoryRepository(db_session, acme), relationships)

        await service.delete_category(a.id)

        edges = await relationships.list_parent_relationships(child.id)
        assert [(e.id, e.is_primary) for e in edges] == [(kept.id, True)]


class TestClassifiedEntities:
    async def test_count_relying_on(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        infra, secu, pare_feu = await _categories(
            db_session, acme, "Infrastructure", "Sécurité Réseau", "Pare-feu"
        )
        repo = ClassifiedEntityRepository(db_session, acme)
        await repo.create_entity("fw-01", pare_feu.id)
        await repo.create_entity("fw-02", pare_feu.id, placement_parent_id=infra.id)
        await repo.create_entity("fw-03", pare_feu.id, placement_parent_id=secu.id)

        assert await repo.count_relying_on(pare_feu.id, infra.id, include_unpinned=True) == 2
        assert await repo.count_relying_on(pare_feu.id, infra.id, include_unpinned=False) == 1
        assert await repo.count_relying_on(pare_feu.id, secu.id, include_unpinned=False) == 1

    async def test_entities_require_tenant(self, db_session) -> None:
        with pytest.raises(ValueError):
            await ClassifiedEntityRepository(db_session, None).create_entity("x", "cat")


class TestOrgUnits:
    async def test_levels_and_children(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        repo = OrgUnitRepository(db_session, acme)
        dg = await repo.create_org_unit(OrgUnitCreate(name="DG"), hierarchy_level=1)
        si = await repo.create_org_unit(
            OrgUnitCreate(name="SI", parent_id=dg.id), hierarchy_level=2
        )
        assert await repo.count_children(dg.id) == 1

        await repo.update_org_unit(si.id, OrgUnitUpdate(clear_parent=True), hierarchy_level=1)
        await repo.set_hierarchy_levels({si.id: 1})
        moved = await repo.get_by_id(si.id)
        assert moved.parent_id is None
        assert moved.hierarchy_level == 1
        assert await repo.count_children(dg.id) == 0

    async def test_template_unit_visible_not_owned(self, db_session, tenant_ids) -> None:
        acme, _ = tenant_ids
        template = await OrgUnitRepository(db_session, None).create_org_unit(
            OrgUnitCreate(name="Direction"), hierarchy_level=1
        )
        repo = OrgUnitRepository(db_session, acme)
        unit = await repo.get_by_id(template.id)
        assert unit is not None
        assert unit.is_template is True
        assert await repo.get_by_name("Direction") is None
        assert await repo.delete_org_unit(template.id) is False
