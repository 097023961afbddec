"""OrgUnitService unit tests with a mocked repository."""

from unittest.mock import AsyncMock

import pytest

from app.application.dtos.org_unit import OrgUnitCreate, OrgUnitResult, OrgUnitUpdate
from app.application.use_cases.org_units import OrgUnitService
from app.domain.exceptions import (
    CycleDetectedException,
    DuplicateNameException,
    OrgUnitHasChildrenException,
    ReadOnlyTemplateException,
    SelfReferenceException,
    ValidationException,
)


def _unit(
    unit_id: str,
    parent_id: str | None = None,
    level: int = 1,
    tenant_id: str | None = "t1",
) -> OrgUnitResult:
    return OrgUnitResult(
        id=unit_id,
        tenant_id=tenant_id,
        name=unit_id.upper(),
        short_code=None,
        description=None,
        parent_id=parent_id,
        hierarchy_level=level,
        is_active=True,
    )


@pytest.fixture
def repo():
    """Repository over dg -> si -> infra, plus the template root tpl."""
    units = {
        "dg": _unit("dg"),
        "si": _unit("si", "dg", 2),
        "infra": _unit("infra", "si", 3),
        "tpl": _unit("tpl", tenant_id=None),
    }
    mock = AsyncMock()
    mock.tenant_id = "t1"
    mock.get_by_id = AsyncMock(side_effect=lambda uid: units.get(uid))
    mock.get_by_name = AsyncMock(return_value=None)
    mock.list_visible = AsyncMock(return_value=list(units.values()))
    mock.count_children = AsyncMock(return_value=0)
    return mock


async def test_create_root_unit(repo) -> None:
    repo.create_org_unit = AsyncMock(return_value=_unit("new"))
    service = OrgUnitService(repo)

    await service.create_unit(OrgUnitCreate(name="  Achats  "))

    data = repo.create_org_unit.await_args.args[0]
    assert data.name == "Achats"
    assert repo.create_org_unit.await_args.kwargs == {"hierarchy_level": 1}


async def test_create_under_parent_sets_level(repo) -> None:
    repo.create_org_unit = AsyncMock(return_value=_unit("new", "si", 3))
    service = OrgUnitService(repo)

    await service.create_unit(OrgUnitCreate(name="Réseaux", parent_id="si"))

    assert repo.create_org_unit.await_args.kwargs == {"hierarchy_level": 3}


async def test_create_blank_name_rejected(repo) -> None:
    with pytest.raises(ValidationException):
        await OrgUnitService(repo).create_unit(OrgUnitCreate(name="   "))


async def test_create_duplicate_name_rejected(repo) -> None:
    repo.get_by_name = AsyncMock(return_value=_unit("dg"))
    with pytest.raises(DuplicateNameException):
        await OrgUnitService(repo).create_unit(OrgUnitCreate(name="DG"))


async def test_reparent_under_descendant_is_cycle(repo) -> None:
    with pytest.raises(CycleDetectedException):
        await OrgUnitService(repo).update_unit("dg", OrgUnitUpdate(parent_id="infra"))
    repo.update_org_unit.assert_not_awaited()


async def test_reparent_under_self_rejected(repo) -> None:
    with pytest.raises(SelfReferenceException):
        await OrgUnitService(repo).update_unit("si", OrgUnitUpdate(parent_id="si"))


async def test_reparent_recomputes_descendant_levels(repo) -> None:
    repo.update_org_unit = AsyncMock(return_value=_unit("si", None, 1))
    service = OrgUnitService(repo)

    await service.update_unit("si", OrgUnitUpdate(clear_parent=True))

    assert repo.update_org_unit.await_args.kwargs == {"hierarchy_level": 1}
    repo.set_hierarchy_levels.assert_awaited_once_with({"infra": 2})


async def test_template_unit_is_read_only(repo) -> None:
    with pytest.raises(ReadOnlyTemplateException):
        await OrgUnitService(repo).update_unit("tpl", OrgUnitUpdate(name="X"))
    with pytest.raises(ReadOnlyTemplateException):
        await OrgUnitService(repo).delete_unit("tpl")


async def test_delete_with_children_rejected(repo) -> None:
    repo.count_children = AsyncMock(return_value=1)
    with pytest.raises(OrgUnitHasChildrenException):
        await OrgUnitService(repo).delete_unit("si")
    repo.delete_org_unit.assert_not_awaited()


async def test_tree_search_keeps_path(repo) -> None:
    forest = await OrgUnitService(repo).get_tree(search="infra")
    assert [n.id for n in forest] == ["dg"]
    assert forest[0].children[0].children[0].id == "infra"
