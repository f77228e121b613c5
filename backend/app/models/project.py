"""SQLAlchemy model for portfolio projects."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID, JSONDocument, new_guid, utcnow
from ..enums import ProjectCategory, ProjectStatus


class Project(Base):
    """Showcased piece of work, hidden from the public until published."""

    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("team_size IS NULL OR team_size >= 1", name="ck_projects_team_size_positive"),
        CheckConstraint("views >= 0 AND likes >= 0", name="ck_projects_counters_non_negative"),
    )

    id = Column("project_id", GUID(), primary_key=True, default=new_guid)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(String(200), nullable=True)
    images = Column(JSONDocument, nullable=False, default=list)
    thumbnail = Column(String(500), nullable=False)
    technologies = Column(JSONDocument, nullable=False, default=list)
    category = Column(
        Enum(
            ProjectCategory,
            name="project_category_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
    )
    tags = Column(JSONDocument, nullable=False, default=list)
    live_url = Column(String(500), nullable=True)
    github_url = Column(String(500), nullable=True)
    status = Column(
        Enum(
            ProjectStatus,
            name="project_status_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=ProjectStatus.COMPLETED,
    )
    featured = Column(Boolean, nullable=False, default=False, server_default="0")
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    client_name = Column(String(120), nullable=True)
    team_size = Column(Integer, nullable=True)
    my_role = Column(String(120), nullable=True)
    challenges = Column(JSONDocument, nullable=False, default=list)
    solutions = Column(JSONDocument, nullable=False, default=list)
    results = Column(Text, nullable=True)
    views = Column(Integer, nullable=False, default=0, server_default="0")
    likes = Column(Integer, nullable=False, default=0, server_default="0")
    priority = Column(Integer, nullable=False, default=0, server_default="0")
    is_published = Column(Boolean, nullable=False, default=True, server_default="1")
    created_by_id = Column(
        "created_by",
        GUID(),
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    created_by = relationship("User", lazy="joined")


Index("projects_featured_priority_idx", Project.featured, Project.priority, Project.created_at)
Index("projects_published_created_idx", Project.is_published, Project.created_at)
