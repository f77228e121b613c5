"""Router for skills."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..enums import ResourceKind, SkillCategory
from ..security import CallerIdentity, get_caller, require_admin
from ..services import ResourceLister, SkillService
from .dependencies import build_list_request, get_lister, list_payload

router = APIRouter(prefix="/skills", tags=["skills"])

SkillList = schemas.ListResponse[schemas.SkillRead]
SkillEnvelope = schemas.DataResponse[schemas.SkillRead]


def _get_skill_or_404(db: Session, skill_id: str) -> models.Skill:
    skill = SkillService.get_skill(db, skill_id)
    if skill is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")
    return skill


@router.get("/", response_model=SkillList)
def list_skills(
    request: Request,
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    caller: CallerIdentity = Depends(get_caller),
    lister: ResourceLister = Depends(get_lister),
):
    list_request = build_list_request(
        request, page=page, limit=limit, sort_by=sort_by, order=order, search=search
    )
    result = lister.list(ResourceKind.SKILL, list_request, caller.role)
    return list_payload(result)


@router.get("/category/{category}", response_model=SkillList)
def list_skills_by_category(category: str, db: Session = Depends(get_db)):
    try:
        skill_category = SkillCategory(category)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown skill category '{category}'",
        ) from exc
    skills = SkillService.list_by_category(db, skill_category)
    return {"success": True, "count": len(skills), "data": skills}


@router.get("/{skill_id}", response_model=SkillEnvelope)
def get_skill(skill_id: str, db: Session = Depends(get_db)):
    return {"success": True, "data": _get_skill_or_404(db, skill_id)}


@router.post("/", response_model=SkillEnvelope, status_code=status.HTTP_201_CREATED)
def create_skill(
    skill_in: schemas.SkillCreate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    skill = SkillService.create_skill(db, skill_in, created_by=admin)
    return {"success": True, "message": "Skill created successfully", "data": skill}


@router.put("/reorder", response_model=SkillList, dependencies=[Depends(require_admin)])
def reorder_skills(payload: schemas.SkillReorderRequest, db: Session = Depends(get_db)):
    """Persist new display positions for several skills at once."""
    try:
        skills = SkillService.reorder(db, payload.skills)
    except LookupError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Skill {exc.args[0]} not found",
        ) from exc
    return {"success": True, "count": len(skills), "data": skills}


@router.put("/{skill_id}", response_model=SkillEnvelope, dependencies=[Depends(require_admin)])
def update_skill(skill_id: str, skill_in: schemas.SkillUpdate, db: Session = Depends(get_db)):
    skill = SkillService.update_skill(db, _get_skill_or_404(db, skill_id), skill_in)
    return {"success": True, "message": "Skill updated successfully", "data": skill}


@router.delete("/{skill_id}", response_model=schemas.ActionResponse, dependencies=[Depends(require_admin)])
def delete_skill(skill_id: str, db: Session = Depends(get_db)):
    SkillService.delete_skill(db, _get_skill_or_404(db, skill_id))
    return schemas.ActionResponse(message="Skill deleted successfully")
