"""Tests for free-text search patterns in the repositories."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from src.siteline.repositories import ProfileRepository, ProjectRepository
from src.siteline.repositories.base import contains_pattern

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("search", "expected"),
    [
        ("tower", "%tower%"),
        ("50%", "%50\\%%"),
        ("lot_7", "%lot\\_7%"),
        ("C:\\site", "%C:\\\\site%"),
    ],
)
def test_contains_pattern_escapes_wildcards(search, expected):
    assert contains_pattern(search) == expected


def compiled(statement):
    return statement.compile(dialect=postgresql.dialect())


async def test_profile_search_uses_escaped_pattern(session):
    session.execute = AsyncMock(return_value=MagicMock())

    await ProfileRepository(session).list_profiles(search="50%")

    query = compiled(session.execute.call_args.args[0])
    assert "ESCAPE" in str(query)
    assert "%50\\%%" in query.params.values()


async def test_project_search_uses_escaped_pattern(session):
    session.execute = AsyncMock(return_value=MagicMock())
    session.scalar = AsyncMock(return_value=0)

    await ProjectRepository(session).list_projects(search="lot_7")

    query = compiled(session.execute.call_args.args[0])
    assert "ESCAPE" in str(query)
    assert "%lot\\_7%" in query.params.values()
