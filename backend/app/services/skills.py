"""Business logic for skills."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from .. import models, schemas
from ..db_types import parse_guid
from ..enums import SkillCategory


class SkillService:
    @staticmethod
    def get_skill(db: Session, skill_id: str) -> Optional[models.Skill]:
        skill_id = parse_guid(skill_id)
        if skill_id is None:
            return None
        return db.query(models.Skill).filter(models.Skill.id == skill_id).first()

    @staticmethod
    def list_by_category(db: Session, category: SkillCategory) -> list[models.Skill]:
        """Active skills of a category, ordered for display."""

        return (
            db.query(models.Skill)
            .filter(models.Skill.category == category, models.Skill.is_active.is_(True))
            .order_by(
                models.Skill.order.asc(),
                models.Skill.proficiency.desc(),
                models.Skill.created_at.desc(),
                models.Skill.id.asc(),
            )
            .all()
        )

    @staticmethod
    def create_skill(
        db: Session,
        data: schemas.SkillCreate,
        *,
        created_by: Optional[models.User] = None,
    ) -> models.Skill:
        skill = models.Skill(**data.model_dump())
        if created_by is not None:
            skill.created_by_id = created_by.id
        db.add(skill)
        db.commit()
        db.refresh(skill)
        return skill

    @staticmethod
    def update_skill(db: Session, skill: models.Skill, data: schemas.SkillUpdate) -> models.Skill:
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(skill, key, value)
        db.commit()
        db.refresh(skill)
        return skill

    @staticmethod
    def delete_skill(db: Session, skill: models.Skill) -> None:
        db.delete(skill)
        db.commit()

    @staticmethod
    def reorder(db: Session, entries: Iterable[schemas.SkillOrder]) -> list[models.Skill]:
        """Apply display positions in one transaction.

        Raises ``LookupError`` naming the first unknown id; nothing is
        changed in that case.
        """

        entries = list(entries)
        ids = [entry.id for entry in entries]
        known_ids = [skill_id for skill_id in map(parse_guid, ids) if skill_id is not None]
        skills = {
            str(skill.id): skill
            for skill in db.query(models.Skill).filter(models.Skill.id.in_(known_ids)).all()
        }
        missing = [skill_id for skill_id in ids if parse_guid(skill_id) not in skills]
        if missing:
            raise LookupError(missing[0])

        for entry in entries:
            skills[parse_guid(entry.id)].order = entry.order
        db.commit()
        return (
            db.query(models.Skill)
            .order_by(models.Skill.order.asc(), models.Skill.created_at.desc(), models.Skill.id.asc())
            .all()
        )
