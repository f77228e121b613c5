"""Initial schema for users, projects, messages and skills."""

from __future__ import annotations

from alembic import context, op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "20261001_0001"
down_revision = None
branch_labels = None
depends_on = None


PROJECT_CATEGORIES = (
    "Web Development",
    "Mobile App",
    "UI/UX Design",
    "Full Stack",
    "Frontend",
    "Backend",
    "Other",
)
PROJECT_STATUSES = ("In Progress", "Completed", "On Hold", "Archived")
MESSAGE_CATEGORIES = (
    "General Inquiry",
    "Project Proposal",
    "Job Opportunity",
    "Collaboration",
    "Feedback",
    "Other",
)
MESSAGE_STATUSES = ("new", "read", "replied", "archived")
MESSAGE_PRIORITIES = ("low", "medium", "high")
SKILL_CATEGORIES = (
    "Frontend",
    "Backend",
    "Database",
    "Tools & Technologies",
    "Design",
    "Soft Skills",
    "Other",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    if bind is not None:
        dialect_name = bind.dialect.name
    else:
        ctx = context.get_context()
        dialect_name = ctx.dialect.name if ctx is not None else ""

    uuid_type = sa.String(length=36)
    inet_type = sa.String(length=45)
    json_type = sa.JSON()
    if dialect_name == "postgresql":
        uuid_type = postgresql.UUID(as_uuid=True)
        inet_type = postgresql.INET()
        json_type = postgresql.JSONB()

    op.create_table(
        "users",
        sa.Column("user_id", uuid_type, primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column(
            "role",
            sa.Enum("user", "admin", name="user_role_enum"),
            nullable=False,
            server_default="user",
        ),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reset_token_hash", sa.String(length=64), nullable=True),
        sa.Column("reset_token_expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("users_role_idx", "users", ["role"])

    op.create_table(
        "projects",
        sa.Column("project_id", uuid_type, primary_key=True),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("short_description", sa.String(length=200), nullable=True),
        sa.Column("images", json_type, nullable=False),
        sa.Column("thumbnail", sa.String(length=500), nullable=False),
        sa.Column("technologies", json_type, nullable=False),
        sa.Column(
            "category",
            sa.Enum(*PROJECT_CATEGORIES, name="project_category_enum"),
            nullable=False,
        ),
        sa.Column("tags", json_type, nullable=False),
        sa.Column("live_url", sa.String(length=500), nullable=True),
        sa.Column("github_url", sa.String(length=500), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*PROJECT_STATUSES, name="project_status_enum"),
            nullable=False,
            server_default="Completed",
        ),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("client_name", sa.String(length=120), nullable=True),
        sa.Column("team_size", sa.Integer(), nullable=True),
        sa.Column("my_role", sa.String(length=120), nullable=True),
        sa.Column("challenges", json_type, nullable=False),
        sa.Column("solutions", json_type, nullable=False),
        sa.Column("results", sa.Text(), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_by",
            uuid_type,
            sa.ForeignKey("users.user_id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "team_size IS NULL OR team_size >= 1", name="ck_projects_team_size_positive"
        ),
        sa.CheckConstraint("views >= 0 AND likes >= 0", name="ck_projects_counters_non_negative"),
    )
    op.create_index(
        "projects_featured_priority_idx", "projects", ["featured", "priority", "created_at"]
    )
    op.create_index("projects_published_created_idx", "projects", ["is_published", "created_at"])

    op.create_table(
        "messages",
        sa.Column("message_id", uuid_type, primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("subject", sa.String(length=100), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "category",
            sa.Enum(*MESSAGE_CATEGORIES, name="message_category_enum"),
            nullable=False,
            server_default="General Inquiry",
        ),
        sa.Column(
            "status",
            sa.Enum(*MESSAGE_STATUSES, name="message_status_enum"),
            nullable=False,
            server_default="new",
        ),
        sa.Column(
            "priority",
            sa.Enum(*MESSAGE_PRIORITIES, name="message_priority_enum"),
            nullable=False,
            server_default="medium",
        ),
        sa.Column("ip_address", inet_type, nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("is_spam", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("replied_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reply_message", sa.Text(), nullable=True),
        sa.Column("attachments", json_type, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("messages_status_created_idx", "messages", ["status", "created_at"])
    op.create_index("messages_email_idx", "messages", ["email"])

    op.create_table(
        "skills",
        sa.Column("skill_id", uuid_type, primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column(
            "category",
            sa.Enum(*SKILL_CATEGORIES, name="skill_category_enum"),
            nullable=False,
            server_default="Other",
        ),
        sa.Column("proficiency", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("icon", sa.String(length=120), nullable=True),
        sa.Column("color", sa.String(length=16), nullable=False, server_default="#3B82F6"),
        sa.Column("years_of_experience", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_by",
            uuid_type,
            sa.ForeignKey("users.user_id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "proficiency >= 0 AND proficiency <= 100", name="ck_skills_proficiency_range"
        ),
        sa.CheckConstraint("years_of_experience >= 0", name="ck_skills_years_non_negative"),
    )
    op.create_index("skills_category_order_idx", "skills", ["category", "display_order"])
    op.create_index("skills_active_idx", "skills", ["is_active"])


def downgrade() -> None:
    op.drop_index("skills_active_idx", table_name="skills")
    op.drop_index("skills_category_order_idx", table_name="skills")
    op.drop_table("skills")
    op.drop_index("messages_email_idx", table_name="messages")
    op.drop_index("messages_status_created_idx", table_name="messages")
    op.drop_table("messages")
    op.drop_index("projects_published_created_idx", table_name="projects")
    op.drop_index("projects_featured_priority_idx", table_name="projects")
    op.drop_table("projects")
    op.drop_index("users_role_idx", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    if bind is not None and bind.dialect.name == "postgresql":
        for enum_name in (
            "skill_category_enum",
            "message_priority_enum",
            "message_status_enum",
            "message_category_enum",
            "project_status_enum",
            "project_category_enum",
            "user_role_enum",
        ):
            sa.Enum(name=enum_name).drop(bind, checkfirst=True)
