"""Category and category relationship API schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.hierarchy import TreeNode


class CategoryCreateRequest(BaseModel):
    """Request body for creating a category."""

    name: str = Field(..., min_length=1, max_length=255)
    entity_category: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    is_active: bool = True

    @field_validator("name", "entity_category")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class CategoryUpdateRequest(BaseModel):
    """Request body for PATCH (partial update)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    entity_category: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    is_active: bool | None = None

    @field_validator("name", "entity_category")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class CategoryResponse(BaseModel):
    """Category response. tenant_id null marks a shared template."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str | None
    name: str
    entity_category: str
    description: str | None
    is_active: bool
    created_at: datetime | None = None


class CategoryTreeNode(BaseModel):
    """Category placed under its primary parent."""

    id: str
    parent_id: str | None
    name: str
    entity_category: str
    description: str | None
    expanded: bool
    has_children: bool
    children: list[CategoryTreeNode] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: TreeNode) -> CategoryTreeNode:
        category = node.item
        return cls(
            id=node.id,
            parent_id=node.parent_id,
            name=category.name,
            entity_category=category.entity_category,
            description=category.description,
            expanded=node.expanded,
            has_children=node.has_children,
            children=[cls.from_node(child) for child in node.children],
        )


class CategoryTreeResponse(BaseModel):
    roots: list[CategoryTreeNode]
    total: int
    search: str | None = None


class CategoryRelationshipCreateRequest(BaseModel):
    """Request body for POST /hierarchy/categories/relationships."""

    parent_category_id: str = Field(..., min_length=1)
    child_category_id: str = Field(..., min_length=1)


class CategoryRelationshipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str | None
    parent_category_id: str
    child_category_id: str
    is_primary: bool
    created_at: datetime


class CategoryParentResponse(BaseModel):
    """One parent relationship of a category, joined with the parent's name."""

    model_config = ConfigDict(from_attributes=True)

    relationship_id: str
    parent_category_id: str
    parent_name: str
    parent_entity_category: str
    is_primary: bool
    created_at: datetime


class CategoryChildResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    relationship_id: str
    child_category_id: str
    child_name: str
    child_entity_category: str
    is_primary: bool


class CategoryContextResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    path: str
    parent_id: str
    parent_name: str
    is_primary: bool


class CategoryContextsResponse(BaseModel):
    """All parent contexts of a category ("Parent → Child" paths)."""

    model_config = ConfigDict(from_attributes=True)

    category_id: str
    category_name: str
    entity_category: str
    contexts: list[CategoryContextResponse]


class RelationshipMutationResponse(BaseModel):
    """Result of add / promote: the affected relationship and the child's refreshed parents."""

    model_config = ConfigDict(from_attributes=True)

    child_category_id: str
    relationship: CategoryRelationshipResponse | None
    parents: list[CategoryParentResponse]
    changed: bool


class RelationshipDeletionResponse(BaseModel):
    """Result of delete, with the advisory cascade signal."""

    model_config = ConfigDict(from_attributes=True)

    child_category_id: str
    deleted_relationship_id: str
    affected_entity_count: int = Field(
        ..., description="Entities whose placement relied on the deleted relationship"
    )
    primary_cleared: bool
    promoted_relationship_id: str | None
    requires_primary_selection: bool
    warning: str | None = None
    parents: list[CategoryParentResponse]
