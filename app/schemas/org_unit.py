"""Org unit (pôle) API schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.hierarchy import TreeNode


class OrgUnitCreateRequest(BaseModel):
    """Request body for creating an org unit. Omit parent_id for a root unit."""

    name: str = Field(..., min_length=1, max_length=255)
    short_code: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=2000)
    parent_id: str | None = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class OrgUnitUpdateRequest(BaseModel):
    """Request body for PATCH (partial update).

    parent_id re-parents the unit; set clear_parent to make it a root.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    short_code: str | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=2000)
    parent_id: str | None = None
    clear_parent: bool = False
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class OrgUnitResponse(BaseModel):
    """Org unit response. is_template is true for shared units (tenant_id null)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str | None
    name: str
    short_code: str | None
    description: str | None
    parent_id: str | None
    hierarchy_level: int
    is_active: bool
    is_template: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrgUnitTreeNode(BaseModel):
    """One node of the org unit forest, with navigation state."""

    id: str
    parent_id: str | None
    name: str
    short_code: str | None
    description: str | None
    hierarchy_level: int
    is_active: bool
    is_template: bool
    expanded: bool
    has_children: bool
    children: list[OrgUnitTreeNode] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: TreeNode) -> OrgUnitTreeNode:
        unit = node.item
        return cls(
            id=node.id,
            parent_id=node.parent_id,
            name=unit.name,
            short_code=unit.short_code,
            description=unit.description,
            hierarchy_level=unit.hierarchy_level,
            is_active=unit.is_active,
            is_template=unit.is_template,
            expanded=node.expanded,
            has_children=node.has_children,
            children=[cls.from_node(child) for child in node.children],
        )


class OrgUnitTreeResponse(BaseModel):
    """Forest of org units (roots in order) plus the applied search query."""

    roots: list[OrgUnitTreeNode]
    total: int = Field(..., description="Number of nodes in the returned forest")
    search: str | None = None
