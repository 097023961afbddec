"""Category and category relationship endpoints, including the Pare-feu walkthrough."""

from httpx import AsyncClient

from app.infrastructure.persistence.repositories import (
    CategoryRepository,
    ClassifiedEntityRepository,
)

CATEGORIES = "/api/v1/hierarchy/categories"
RELATIONSHIPS = "/api/v1/hierarchy/categories/relationships"


async def _category(client: AsyncClient, headers, name: str, tag: str = "asset") -> dict:
    response = await client.post(
        CATEGORIES, json={"name": name, "entity_category": tag}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _link(client: AsyncClient, headers, parent: dict, child: dict):
    return await client.post(
        RELATIONSHIPS,
        json={"parent_category_id": parent["id"], "child_category_id": child["id"]},
        headers=headers,
    )


async def test_pare_feu_walkthrough(client: AsyncClient, tenant_headers) -> None:
    infra = await _category(client, tenant_headers, "Infrastructure")
    secu = await _category(client, tenant_headers, "Sécurité Réseau")
    pare_feu = await _category(client, tenant_headers, "Pare-feu")

    response = await _link(client, tenant_headers, infra, pare_feu)
    assert response.status_code == 201
    infra_rel = response.json()["relationship"]
    assert infra_rel["is_primary"] is True

    response = await _link(client, tenant_headers, secu, pare_feu)
    assert response.status_code == 201
    body = response.json()
    secu_rel = body["relationship"]
    assert secu_rel["is_primary"] is False
    assert [(p["parent_name"], p["is_primary"]) for p in body["parents"]] == [
        ("Infrastructure", True),
        ("Sécurité Réseau", False),
    ]

    response = await client.patch(
        f"{RELATIONSHIPS}/{secu_rel['id']}/promote", headers=tenant_headers
    )
    assert response.status_code == 200
    primary = {p["parent_name"]: p["is_primary"] for p in response.json()["parents"]}
    assert primary == {"Infrastructure": False, "Sécurité Réseau": True}

    response = await client.get(
        f"{CATEGORIES}/{pare_feu['id']}/contexts", headers=tenant_headers
    )
    assert [c["path"] for c in response.json()["contexts"]] == [
        "Sécurité Réseau → Pare-feu",
        "Infrastructure → Pare-feu",
    ]

    response = await client.delete(f"{RELATIONSHIPS}/{infra_rel['id']}", headers=tenant_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["primary_cleared"] is False
    assert body["requires_primary_selection"] is False
    assert [(p["parent_name"], p["is_primary"]) for p in body["parents"]] == [
        ("Sécurité Réseau", True)
    ]

    response = await client.delete(f"{RELATIONSHIPS}/{secu_rel['id']}", headers=tenant_headers)
    assert response.status_code == 422
    assert response.json()["error"] == "LAST_PARENT_RELATIONSHIP"

    response = await client.get(
        f"{CATEGORIES}/{pare_feu['id']}/parents", headers=tenant_headers
    )
    assert len(response.json()) == 1


async def test_structural_rejections(client: AsyncClient, tenant_headers) -> None:
    a = await _category(client, tenant_headers, "A")
    b = await _category(client, tenant_headers, "B")
    assert (await _link(client, tenant_headers, a, b)).status_code == 201

    response = await _link(client, tenant_headers, a, a)
    assert response.status_code == 422
    assert response.json()["error"] == "SELF_REFERENCE"

    response = await _link(client, tenant_headers, a, b)
    assert response.status_code == 409
    assert response.json()["error"] == "DUPLICATE_RELATIONSHIP"

    response = await _link(client, tenant_headers, b, a)
    assert response.status_code == 422
    assert response.json()["error"] == "CYCLE_DETECTED"

    response = await client.get(f"{CATEGORIES}/{b['id']}/parents", headers=tenant_headers)
    assert len(response.json()) == 1


async def test_stale_relationship_is_conflict(client: AsyncClient, tenant_headers) -> None:
    response = await client.patch(f"{RELATIONSHIPS}/missing/promote", headers=tenant_headers)
    assert response.status_code == 409
    assert response.json()["error"] == "RELATIONSHIP_CONFLICT"


async def test_delete_primary_reports_affected_entities(
    client: AsyncClient, session_factory, tenant, tenant_headers
) -> None:
    infra = await _category(client, tenant_headers, "Infrastructure")
    secu = await _category(client, tenant_headers, "Sécurité Réseau")
    pare_feu = await _category(client, tenant_headers, "Pare-feu")
    primary_rel = (await _link(client, tenant_headers, infra, pare_feu)).json()["relationship"]
    await _link(client, tenant_headers, secu, pare_feu)

    async with session_factory() as session:
        async with session.begin():
            entities = ClassifiedEntityRepository(session, tenant.id)
            await entities.create_entity("fw-01", pare_feu["id"])
            await entities.create_entity("fw-02", pare_feu["id"], placement_parent_id=secu["id"])

    response = await client.delete(f"{RELATIONSHIPS}/{primary_rel['id']}", headers=tenant_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["affected_entity_count"] == 1
    assert body["primary_cleared"] is True
    assert body["requires_primary_selection"] is True
    assert body["warning"]
    assert [p["is_primary"] for p in body["parents"]] == [False]


async def test_category_tree_uses_primary_parent(client: AsyncClient, tenant_headers) -> None:
    infra = await _category(client, tenant_headers, "Infrastructure")
    secu = await _category(client, tenant_headers, "Sécurité Réseau")
    pare_feu = await _category(client, tenant_headers, "Pare-feu")
    await _link(client, tenant_headers, infra, pare_feu)
    await _link(client, tenant_headers, secu, pare_feu)

    response = await client.get(f"{CATEGORIES}/tree", headers=tenant_headers)
    assert response.status_code == 200
    tree = response.json()
    assert tree["total"] == 3
    roots = {r["name"]: r for r in tree["roots"]}
    assert set(roots) == {"Infrastructure", "Sécurité Réseau"}
    assert [c["name"] for c in roots["Infrastructure"]["children"]] == ["Pare-feu"]

    response = await client.get("/api/v1/hierarchy/root-categories", headers=tenant_headers)
    assert {c["name"] for c in response.json()} == {"Infrastructure", "Sécurité Réseau"}

    response = await client.get(
        f"{CATEGORIES}/{pare_feu['id']}/candidate-parents", headers=tenant_headers
    )
    assert response.json() == []

    response = await client.get(f"{CATEGORIES}/{infra['id']}/children", headers=tenant_headers)
    assert [(c["child_name"], c["is_primary"]) for c in response.json()] == [
        ("Pare-feu", True)
    ]


async def test_category_tree_collapse_all(client: AsyncClient, tenant_headers) -> None:
    infra = await _category(client, tenant_headers, "Infrastructure")
    pare_feu = await _category(client, tenant_headers, "Pare-feu")
    await _link(client, tenant_headers, infra, pare_feu)

    response = await client.get(
        f"{CATEGORIES}/tree", params={"collapse_all": "true"}, headers=tenant_headers
    )
    assert response.status_code == 200
    assert [r["expanded"] for r in response.json()["roots"]] == [False]


async def test_delete_category_reassigns_primary(client: AsyncClient, tenant_headers) -> None:
    infra = await _category(client, tenant_headers, "Infrastructure")
    secu = await _category(client, tenant_headers, "Sécurité Réseau")
    pare_feu = await _category(client, tenant_headers, "Pare-feu")
    await _link(client, tenant_headers, infra, pare_feu)
    await _link(client, tenant_headers, secu, pare_feu)

    response = await client.delete(f"{CATEGORIES}/{infra['id']}", headers=tenant_headers)
    assert response.status_code == 204

    response = await client.get(f"{CATEGORIES}/{pare_feu['id']}/parents", headers=tenant_headers)
    assert [(p["parent_name"], p["is_primary"]) for p in response.json()] == [
        ("Sécurité Réseau", True)
    ]


async def test_category_crud_and_filters(client: AsyncClient, tenant_headers) -> None:
    await _category(client, tenant_headers, "Pare-feu", "asset")
    supplier = await _category(client, tenant_headers, "Intégrateur", "supplier")

    response = await client.get(
        CATEGORIES, params={"entity_category": "supplier"}, headers=tenant_headers
    )
    assert [c["id"] for c in response.json()] == [supplier["id"]]

    response = await client.patch(
        f"{CATEGORIES}/{supplier['id']}",
        json={"description": "Intégrateurs réseau"},
        headers=tenant_headers,
    )
    assert response.status_code == 200
    assert response.json()["description"] == "Intégrateurs réseau"

    response = await client.post(
        CATEGORIES,
        json={"name": "Pare-feu", "entity_category": "asset"},
        headers=tenant_headers,
    )
    assert response.status_code == 409

    response = await client.get(f"{CATEGORIES}/missing", headers=tenant_headers)
    assert response.status_code == 404


async def test_template_category_is_read_only(
    client: AsyncClient, session_factory, tenant_headers
) -> None:
    async with session_factory() as session:
        async with session.begin():
            template = await CategoryRepository(session, None).create_category(
                "Infrastructure", "asset"
            )
    own = await _category(client, tenant_headers, "Pare-feu")

    # Tenant categories may sit under a shared template.
    response = await _link(client, tenant_headers, {"id": template.id}, own)
    assert response.status_code == 201

    response = await _link(client, tenant_headers, own, {"id": template.id})
    assert response.status_code == 403
    assert response.json()["error"] == "READ_ONLY_TEMPLATE"

    response = await client.delete(f"{CATEGORIES}/{template.id}", headers=tenant_headers)
    assert response.status_code == 403


async def test_update_blank_classification_returns_422(
    client: AsyncClient, tenant_headers
) -> None:
    pare_feu = await _category(client, tenant_headers, "Pare-feu")

    response = await client.patch(
        f"{CATEGORIES}/{pare_feu['id']}",
        json={"entity_category": "   "},
        headers=tenant_headers,
    )
    assert response.status_code == 422

    response = await client.get(f"{CATEGORIES}/{pare_feu['id']}", headers=tenant_headers)
    assert response.json()["entity_category"] == "asset"
