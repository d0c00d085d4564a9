"""Row visibility subqueries shared by the project-scoped repositories."""

from uuid import UUID

from sqlalchemy import or_
from sqlmodel import select

from src.siteline.models import Project, ProjectMember


def member_project_ids(viewer_id: UUID):  # type: ignore[no-untyped-def]
    return select(ProjectMember.project_id).where(ProjectMember.user_id == viewer_id)


def visible_project_ids(viewer_id: UUID):  # type: ignore[no-untyped-def]
    """Projects the viewer created or belongs to."""
    return select(Project.id).where(
        or_(
            Project.created_by == viewer_id,
            Project.id.in_(member_project_ids(viewer_id)),  # type: ignore[attr-defined]
        )
    )
