# src/forum_diff/schemas/revision.py
"""Schemas for the ``diff`` resource documents."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .common import PageLinks, PageMeta, ToOneRelationship


class RevisionAttributes(BaseModel):
    """Serialized attributes of one revision.

    The HTML fields and ``comparisonBetween`` stay null for deleted revisions;
    the three diff fields also stay null in preview-only mode.
    """

    revision: int
    created_at: datetime | None = Field(None, alias="createdAt")
    deleted_at: datetime | None = Field(None, alias="deletedAt")
    rollbacked_at: datetime | None = Field(None, alias="rollbackedAt")
    can_delete_edit_history: bool = Field(False, alias="canDeleteEditHistory")
    inline_html: str | None = Field(None, alias="inlineHtml")
    side_by_side_html: str | None = Field(None, alias="sideBySideHtml")
    combined_html: str | None = Field(None, alias="combinedHtml")
    preview_html: str | None = Field(None, alias="previewHtml")
    comparison_between: str | None = Field(None, alias="comparisonBetween")

    model_config = ConfigDict(populate_by_name=True)


class RevisionRelationships(BaseModel):
    """Users involved in a revision."""

    actor: ToOneRelationship = Field(default_factory=ToOneRelationship)
    deleted_user: ToOneRelationship = Field(default_factory=ToOneRelationship, alias="deletedUser")
    rollbacked_user: ToOneRelationship = Field(
        default_factory=ToOneRelationship, alias="rollbackedUser"
    )

    model_config = ConfigDict(populate_by_name=True)


class RevisionResource(BaseModel):
    """One ``diff`` resource object."""

    type: Literal["diff"] = "diff"
    id: str
    attributes: RevisionAttributes
    relationships: RevisionRelationships


class UserAttributes(BaseModel):
    """Public attributes of an included user."""

    username: str


class UserResource(BaseModel):
    """A user included alongside revision data."""

    type: Literal["users"] = "users"
    id: str
    attributes: UserAttributes


class RevisionDocument(BaseModel):
    """Top-level document for a single revision."""

    data: RevisionResource
    included: list[UserResource] = Field(default_factory=list)


class RevisionListDocument(BaseModel):
    """Top-level document for a page of revisions."""

    data: list[RevisionResource]
    included: list[UserResource] = Field(default_factory=list)
    links: PageLinks
    meta: PageMeta
