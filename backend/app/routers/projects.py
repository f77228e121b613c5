"""Router exposing the public project catalogue and its admin CRUD."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..enums import CallerRole, ResourceKind
from ..security import CallerIdentity, get_caller, require_admin
from ..services import GithubClient, GithubClientError, ListRequest, ProjectService, ResourceLister
from ..services.listing import SortResolver
from .dependencies import (
    PROJECT_LIST_PARAMS,
    build_list_request,
    get_github_client,
    get_lister,
    list_payload,
)

router = APIRouter(prefix="/projects", tags=["projects"])

ProjectList = schemas.ListResponse[schemas.ProjectRead]
ProjectEnvelope = schemas.DataResponse[schemas.ProjectRead]


def _get_project_or_404(db: Session, project_id: str) -> models.Project:
    project = ProjectService.get_project(db, project_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


@router.get("/", response_model=ProjectList)
def list_projects(
    request: Request,
    page: int = Query(1, description="1-based page number"),
    limit: Optional[int] = Query(None, description="Page size, capped by the server maximum"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None, description="asc or desc"),
    search: Optional[str] = Query(None),
    is_published: Optional[str] = Query(
        None,
        alias="isPublished",
        description="Admins only: true, false or all",
    ),
    caller: CallerIdentity = Depends(get_caller),
    lister: ResourceLister = Depends(get_lister),
):
    """Return a page of projects; unpublished ones are visible to admins only."""
    list_request = build_list_request(
        request,
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
        search=search,
        published=is_published,
        reserved=PROJECT_LIST_PARAMS,
    )
    result = lister.list(ResourceKind.PROJECT, list_request, caller.role)
    return list_payload(result)


@router.get("/featured", response_model=ProjectList)
def list_featured_projects(
    limit: int = Query(6, description="Number of featured projects to return"),
    lister: ResourceLister = Depends(get_lister),
):
    """Published featured projects, highest priority first."""
    result = lister.list(
        ResourceKind.PROJECT,
        ListRequest(limit=limit, filters={"featured": "true"}),
        CallerRole.ANONYMOUS,
        order=SortResolver.featured_order(),
    )
    return list_payload(result, paginated=False)


@router.get("/category/{category}", response_model=ProjectList)
def list_projects_by_category(
    category: str,
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None),
    lister: ResourceLister = Depends(get_lister),
):
    list_request = ListRequest(
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
        filters={"category": category},
    )
    result = lister.list(ResourceKind.PROJECT, list_request, CallerRole.ANONYMOUS)
    return list_payload(result)


@router.get("/search", response_model=ProjectList)
def search_projects(
    q: Optional[str] = Query(None, description="Text matched against title, description and tags"),
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    lister: ResourceLister = Depends(get_lister),
):
    if not q or not q.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide a search query",
        )
    result = lister.list(
        ResourceKind.PROJECT,
        ListRequest(page=page, limit=limit, search=q),
        CallerRole.ANONYMOUS,
    )
    return list_payload(result)


@router.get("/github-repos", response_model=schemas.ListResponse[schemas.GithubRepository])
def list_github_repositories(
    username: Optional[str] = Query(None),
    limit: int = Query(6, ge=1, le=100),
    client: GithubClient = Depends(get_github_client),
):
    """Proxy the most recently updated public GitHub repositories."""
    try:
        repositories = client.list_repositories(username, limit)
    except GithubClientError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch GitHub repositories",
        ) from exc
    return {"success": True, "count": len(repositories), "data": repositories}


@router.get("/{project_id}", response_model=ProjectEnvelope)
def get_project(
    project_id: str,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
):
    project = _get_project_or_404(db, project_id)
    if not project.is_published and not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This project is not published",
        )
    return {"success": True, "data": project}


@router.post("/{project_id}/view", response_model=schemas.DataResponse[schemas.ProjectCounter])
def register_project_view(project_id: str, db: Session = Depends(get_db)):
    views = ProjectService.increment_counter(db, project_id, "views")
    if views is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return {"success": True, "data": {"views": views}}


@router.post("/{project_id}/like", response_model=schemas.DataResponse[schemas.ProjectCounter])
def like_project(project_id: str, db: Session = Depends(get_db)):
    likes = ProjectService.increment_counter(db, project_id, "likes")
    if likes is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return {"success": True, "message": "Project liked", "data": {"likes": likes}}


@router.post("/", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: schemas.ProjectCreate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    project = ProjectService.create_project(db, project_in, created_by=admin)
    return {"success": True, "message": "Project created successfully", "data": project}


@router.put("/{project_id}", response_model=ProjectEnvelope, dependencies=[Depends(require_admin)])
def update_project(
    project_id: str,
    project_in: schemas.ProjectUpdate,
    db: Session = Depends(get_db),
):
    project = _get_project_or_404(db, project_id)
    project = ProjectService.update_project(db, project, project_in)
    return {"success": True, "message": "Project updated successfully", "data": project}


@router.delete("/{project_id}", response_model=schemas.ActionResponse, dependencies=[Depends(require_admin)])
def delete_project(project_id: str, db: Session = Depends(get_db)):
    project = _get_project_or_404(db, project_id)
    ProjectService.delete_project(db, project)
    return schemas.ActionResponse(message="Project deleted successfully")
