"""SQLAlchemy model for skills shown on the public skills page."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
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
from ..db_types import GUID, new_guid, utcnow
from ..enums import SkillCategory


class Skill(Base):
    __tablename__ = "skills"
    __table_args__ = (
        CheckConstraint(
            "proficiency >= 0 AND proficiency <= 100",
            name="ck_skills_proficiency_range",
        ),
        CheckConstraint("years_of_experience >= 0", name="ck_skills_years_non_negative"),
    )

    id = Column("skill_id", GUID(), primary_key=True, default=new_guid)
    name = Column(String(50), nullable=False)
    category = Column(
        Enum(
            SkillCategory,
            name="skill_category_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=SkillCategory.OTHER,
    )
    proficiency = Column(Integer, nullable=False, default=50, server_default="50")
    icon = Column(String(120), nullable=True)
    color = Column(String(16), nullable=False, default="#3B82F6", server_default="#3B82F6")
    years_of_experience = Column(Integer, nullable=False, default=0, server_default="0")
    description = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default="1")
    order = Column("display_order", Integer, nullable=False, default=0, server_default="0")
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


Index("skills_category_order_idx", Skill.category, Skill.order)
Index("skills_active_idx", Skill.is_active)
