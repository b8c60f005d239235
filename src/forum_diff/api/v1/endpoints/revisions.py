# src/forum_diff/api/v1/endpoints/revisions.py
"""Revision history (``diff`` resource) endpoints for the Forum Diff API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request, status

from forum_diff.api.v1.dependencies import (
    ComparatorDep,
    CurrentUserDep,
    RevisionServiceDep,
)
from forum_diff.core.errors import NotFoundError, PermissionDeniedError, RevisionConflictError
from forum_diff.core.settings import settings
from forum_diff.db.time import as_utc
from forum_diff.models import Revision, User
from forum_diff.schemas.common import PageLinks, PageMeta, ResourceIdentifier, ToOneRelationship
from forum_diff.schemas.revision import (
    RevisionAttributes,
    RevisionDocument,
    RevisionListDocument,
    RevisionRelationships,
    RevisionResource,
    UserAttributes,
    UserResource,
)
from forum_diff.services.comparison import RevisionComparator
from forum_diff.services.revisions import RevisionService

router = APIRouter(prefix="/diff", tags=["diff"])


def _relationship(user: User | None) -> ToOneRelationship:
    if user is None:
        return ToOneRelationship()
    return ToOneRelationship(data=ResourceIdentifier(type="users", id=str(user.id)))


def _included(revisions: list[Revision]) -> list[UserResource]:
    """Collect the users referenced by ``revisions``, each once."""
    users: dict[int, User] = {}
    for revision in revisions:
        for user in (revision.actor, revision.deleted_user, revision.rollbacked_user):
            if user is not None:
                users.setdefault(user.id, user)
    return [
        UserResource(id=str(user.id), attributes=UserAttributes(username=user.username))
        for user in users.values()
    ]


def _to_resource(
    revision: Revision,
    actor: User,
    comparator: RevisionComparator,
    service: RevisionService,
) -> RevisionResource:
    """Serialize one revision, rendering its comparison unless it is deleted."""
    attributes = RevisionAttributes(
        revision=revision.revision,
        created_at=as_utc(revision.created_at),
        deleted_at=as_utc(revision.deleted_at),
        rollbacked_at=as_utc(revision.rollbacked_at),
        can_delete_edit_history=service.can_delete(revision, actor),
    )

    result = comparator.compare(revision)
    if result is not None:
        attributes.preview_html = result.preview_html
        attributes.inline_html = result.inline_html
        attributes.side_by_side_html = result.side_by_side_html
        attributes.combined_html = result.combined_html
        attributes.comparison_between = result.comparison_between

    return RevisionResource(
        id=str(revision.id),
        attributes=attributes,
        relationships=RevisionRelationships(
            actor=_relationship(revision.actor),
            deleted_user=_relationship(revision.deleted_user),
            rollbacked_user=_relationship(revision.rollbacked_user),
        ),
    )


def _require_view(service: RevisionService, current_user: User) -> None:
    if not service.can_view(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not allowed to view edit history",
        )


@router.get("", response_model=RevisionListDocument)
async def list_revisions(
    request: Request,
    current_user: CurrentUserDep,
    service: RevisionServiceDep,
    comparator: ComparatorDep,
    post_id: int = Query(..., alias="id", description="Post whose revisions are listed"),
    offset: int = Query(0, ge=0, alias="page[offset]"),
    limit: int | None = Query(None, ge=1, alias="page[limit]"),
) -> RevisionListDocument:
    """List a post's revisions, newest first.

    Deleted revisions are included; their HTML fields stay empty.

    Raises:
        HTTPException: If the user lacks ``viewEditHistory`` or the post
            (or an archived payload) is missing
    """
    _require_view(service, current_user)
    page_size = min(limit or settings.diff_page_limit, settings.diff_page_max)

    try:
        service.posts.find_or_fail(post_id)
        total = service.revisions.count_for_post(post_id)
        revisions = service.revisions.list_for_post(post_id, offset=offset, limit=page_size)
        data = [
            _to_resource(revision, current_user, comparator, service)
            for revision in revisions
        ]
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(err),
        ) from err

    def _page_url(page_offset: int) -> str:
        return str(
            request.url.include_query_params(
                **{"page[offset]": page_offset, "page[limit]": page_size}
            )
        )

    links = PageLinks(
        first=_page_url(0),
        prev=_page_url(max(offset - page_size, 0)) if offset > 0 else None,
        next=_page_url(offset + page_size) if offset + page_size < total else None,
    )

    return RevisionListDocument(
        data=data,
        included=_included(revisions),
        links=links,
        meta=PageMeta(total=total, offset=offset, limit=page_size),
    )


@router.get("/{revision_id}", response_model=RevisionDocument)
async def get_revision(
    revision_id: int,
    current_user: CurrentUserDep,
    service: RevisionServiceDep,
    comparator: ComparatorDep,
) -> RevisionDocument:
    """Get a single revision with its rendered comparison."""
    _require_view(service, current_user)
    try:
        revision = service.revisions.find_or_fail(revision_id)
        resource = _to_resource(revision, current_user, comparator, service)
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(err),
        ) from err
    return RevisionDocument(data=resource, included=_included([revision]))


@router.delete("/{revision_id}", response_model=RevisionDocument)
async def delete_revision(
    revision_id: int,
    current_user: CurrentUserDep,
    service: RevisionServiceDep,
    comparator: ComparatorDep,
) -> RevisionDocument:
    """Soft-delete a revision and return its updated representation.

    Raises:
        HTTPException: If the revision is missing, the user may not delete it,
            or it was already deleted
    """
    try:
        revision = service.revisions.find_or_fail(revision_id)
        revision = service.delete_revision(revision, current_user)
        resource = _to_resource(revision, current_user, comparator, service)
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(err),
        ) from err
    except PermissionDeniedError as err:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(err),
        ) from err
    except RevisionConflictError as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(err),
        ) from err
    return RevisionDocument(data=resource, included=_included([revision]))
