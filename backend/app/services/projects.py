"""Business logic for portfolio projects."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from .. import models, schemas
from ..db_types import parse_guid

LOGGER = logging.getLogger(__name__)

_COUNTERS = {"views", "likes"}


class ProjectService:
    """Encapsulates CRUD operations and counters for projects."""

    @staticmethod
    def get_project(db: Session, project_id: str) -> Optional[models.Project]:
        project_id = parse_guid(project_id)
        if project_id is None:
            return None
        return db.query(models.Project).filter(models.Project.id == project_id).first()

    @staticmethod
    def create_project(
        db: Session,
        data: schemas.ProjectCreate,
        *,
        created_by: Optional[models.User] = None,
    ) -> models.Project:
        project = models.Project(**data.model_dump())
        if created_by is not None:
            project.created_by_id = created_by.id
        db.add(project)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(project)
        LOGGER.info("Created project %s (%s)", project.id, project.title)
        return project

    @staticmethod
    def update_project(
        db: Session,
        project: models.Project,
        data: schemas.ProjectUpdate,
    ) -> models.Project:
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(project, key, value)
        db.commit()
        db.refresh(project)
        return project

    @staticmethod
    def delete_project(db: Session, project: models.Project) -> None:
        db.delete(project)
        db.commit()
        LOGGER.info("Deleted project %s", project.id)

    @staticmethod
    def increment_counter(db: Session, project_id: str, counter: str) -> Optional[int]:
        """Atomically bump ``views`` or ``likes`` and return the new value.

        Returns ``None`` when the project does not exist.
        """

        if counter not in _COUNTERS:
            raise ValueError(f"Unknown counter '{counter}'")
        project_id = parse_guid(project_id)
        if project_id is None:
            return None
        column = getattr(models.Project, counter)
        updated = (
            db.query(models.Project)
            .filter(models.Project.id == project_id)
            .update({column: column + 1}, synchronize_session=False)
        )
        db.commit()
        if not updated:
            return None
        return db.query(column).filter(models.Project.id == project_id).scalar()
