"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import PageLinks, PageMeta, ResourceIdentifier, ToOneRelationship
from .post import PostResponse, PostUpdate
from .revision import (
    RevisionAttributes,
    RevisionDocument,
    RevisionListDocument,
    RevisionRelationships,
    RevisionResource,
    UserResource,
)

__all__ = [
    "PageLinks", "PageMeta", "ResourceIdentifier", "ToOneRelationship",
    "PostResponse", "PostUpdate",
    "RevisionAttributes", "RevisionDocument", "RevisionListDocument",
    "RevisionRelationships", "RevisionResource", "UserResource",
]
