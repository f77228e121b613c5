"""Command line entry-point that fills the database with demo portfolio content."""

from __future__ import annotations

import argparse
import logging
import os
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from .. import models
from ..database import session_scope
from ..enums import (
    MessageCategory,
    MessagePriority,
    ProjectCategory,
    ProjectStatus,
    SkillCategory,
    UserRole,
)
from ..migrations import run_database_migrations
from ..security import generate_password_hash
from ..services.users import UserService

LOGGER = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@portfolio.com"
DEFAULT_ADMIN_PASSWORD = "Admin123"
DEMO_USER_EMAIL = "user@portfolio.com"
DEMO_USER_PASSWORD = "User1234"

SAMPLE_PROJECTS = [
    {
        "title": "E-Commerce Platform",
        "description": "A full-featured online store with cart, checkout, payments and an admin dashboard.",
        "short_description": "Online store with payments and admin tools",
        "thumbnail": "https://images.unsplash.com/photo-1556742049-0cfed4f6a45d",
        "technologies": ["React", "FastAPI", "PostgreSQL", "Stripe"],
        "category": ProjectCategory.FULL_STACK,
        "tags": ["ecommerce", "payments", "dashboard"],
        "github_url": "https://github.com/example/ecommerce-platform",
        "live_url": "https://shop.example.com",
        "status": ProjectStatus.COMPLETED,
        "featured": True,
        "priority": 10,
        "start_date": date(2025, 1, 15),
        "end_date": date(2025, 4, 30),
        "my_role": "Lead Developer",
        "team_size": 3,
        "challenges": ["Handling concurrent checkouts"],
        "solutions": ["Row-level locking around stock reservations"],
    },
    {
        "title": "Task Management App",
        "description": "Collaborative task board with real-time updates, labels and due-date reminders.",
        "short_description": "Kanban board for small teams",
        "thumbnail": "https://images.unsplash.com/photo-1540350394557-8d14678e7f91",
        "technologies": ["Vue", "Node.js", "WebSockets"],
        "category": ProjectCategory.WEB_DEVELOPMENT,
        "tags": ["productivity", "realtime"],
        "status": ProjectStatus.COMPLETED,
        "featured": True,
        "priority": 8,
    },
    {
        "title": "Weather Dashboard",
        "description": "Responsive dashboard showing forecasts and historical charts for saved locations.",
        "thumbnail": "https://images.unsplash.com/photo-1504608524841-42fe6f032b4b",
        "technologies": ["React", "Chart.js"],
        "category": ProjectCategory.FRONTEND,
        "tags": ["charts", "api"],
        "status": ProjectStatus.COMPLETED,
        "priority": 5,
    },
    {
        "title": "Fitness Tracker",
        "description": "Mobile application that records workouts and syncs progress across devices.",
        "thumbnail": "https://images.unsplash.com/photo-1517836357463-d25dfeac3438",
        "technologies": ["React Native", "Firebase"],
        "category": ProjectCategory.MOBILE_APP,
        "tags": ["health", "mobile"],
        "status": ProjectStatus.IN_PROGRESS,
        "priority": 3,
    },
    {
        "title": "Internal Reporting API",
        "description": "Draft reporting service kept private until the client signs off.",
        "thumbnail": "https://images.unsplash.com/photo-1551288049-bebda4e38f71",
        "technologies": ["Python", "SQLAlchemy"],
        "category": ProjectCategory.BACKEND,
        "status": ProjectStatus.ON_HOLD,
        "is_published": False,
    },
]

SAMPLE_SKILLS = [
    ("React", SkillCategory.FRONTEND, 90, 4, "#61DAFB"),
    ("TypeScript", SkillCategory.FRONTEND, 85, 3, "#3178C6"),
    ("Python", SkillCategory.BACKEND, 88, 5, "#3776AB"),
    ("FastAPI", SkillCategory.BACKEND, 80, 2, "#009688"),
    ("PostgreSQL", SkillCategory.DATABASE, 75, 4, "#336791"),
    ("Docker", SkillCategory.TOOLS, 70, 3, "#2496ED"),
    ("Figma", SkillCategory.DESIGN, 60, 2, "#F24E1E"),
    ("Communication", SkillCategory.SOFT_SKILLS, 85, 6, "#8B5CF6"),
]

SAMPLE_MESSAGES = [
    {
        "name": "Jane Cooper",
        "email": "jane@example.com",
        "subject": "Project inquiry",
        "message": "Hi! I would like to discuss a new web application for my business.",
        "category": MessageCategory.PROJECT_PROPOSAL,
        "priority": MessagePriority.HIGH,
    },
    {
        "name": "Robert Fox",
        "email": "robert@example.com",
        "subject": "Collaboration",
        "message": "Would you be open to collaborating on an open source library?",
        "category": MessageCategory.COLLABORATION,
    },
]


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Seed the portfolio database with an admin, a demo user and sample content."
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete existing projects, skills, messages and users before seeding.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print additional debugging information.",
    )
    return parser.parse_args(argv)


def reset_database(session: Session) -> None:
    for model in (models.Message, models.Skill, models.Project, models.User):
        deleted = session.query(model).delete()
        LOGGER.debug("Deleted %s rows from %s", deleted, model.__tablename__)
    session.flush()


def seed(session: Session) -> dict[str, int]:
    admin = UserService.ensure_admin_account(
        session,
        os.getenv("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL),
        os.getenv("ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
    )
    if UserService.get_by_email(session, DEMO_USER_EMAIL) is None:
        session.add(
            models.User(
                name="Demo User",
                email=DEMO_USER_EMAIL,
                password_hash=generate_password_hash(DEMO_USER_PASSWORD),
                role=UserRole.USER,
            )
        )

    for payload in SAMPLE_PROJECTS:
        session.add(models.Project(created_by_id=admin.id, **payload))

    for position, (name, category, proficiency, years, color) in enumerate(SAMPLE_SKILLS):
        session.add(
            models.Skill(
                name=name,
                category=category,
                proficiency=proficiency,
                years_of_experience=years,
                color=color,
                order=position,
                created_by_id=admin.id,
            )
        )

    for payload in SAMPLE_MESSAGES:
        session.add(models.Message(**payload))

    session.flush()
    return {
        "users": session.query(models.User).count(),
        "projects": len(SAMPLE_PROJECTS),
        "skills": len(SAMPLE_SKILLS),
        "messages": len(SAMPLE_MESSAGES),
    }


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    _configure_logging(args.verbose)
    run_database_migrations()

    with session_scope() as session:
        if args.reset:
            LOGGER.info("Removing existing portfolio data")
            reset_database(session)
        summary = seed(session)
        LOGGER.info("Seeding finished: %s", summary)

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
