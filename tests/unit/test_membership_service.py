"""Tests for MembershipService: adding and removing project members."""

import pytest
from sqlalchemy.exc import IntegrityError

from src.siteline.core.db import DataScope
from src.siteline.core.exceptions import AlreadyMember, CannotRemoveOwner, Forbidden, NotFound
from src.siteline.models import MembershipRole, ProjectMember
from src.siteline.repositories import MemberRepository, ProfileRepository, ProjectRepository
from src.siteline.schemas.project import MemberAdd
from src.siteline.services.membership_service import MembershipService
from src.siteline.services.notification_service import NotificationOutbox
from tests.factories import ProfileFactory, ProjectFactory, ProjectMemberFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def manager():
    return ProfileFactory.project_manager()


@pytest.fixture
def project(manager):
    return ProjectFactory.build(created_by=manager.id)


@pytest.fixture
def owner_membership(project, manager):
    return ProjectMemberFactory.owner(project_id=project.id, user_id=manager.id)


@pytest.fixture
def outbox() -> NotificationOutbox:
    return NotificationOutbox()


@pytest.fixture
def service(session, manager, outbox) -> MembershipService:
    return MembershipService(DataScope(session, viewer_id=manager.id), outbox)


@pytest.fixture
def visible_project(stub, project):
    return stub(ProjectRepository, "get_by_id", return_value=project)


class TestAddMember:
    async def test_adds_member_and_sends_invite(
        self, session, stub, service, manager, project, owner_membership, outbox, visible_project
    ):
        worker = ProfileFactory.worker()
        stub(ProfileRepository, "get_by_email", return_value=worker)
        stub(MemberRepository, "get_membership", side_effect=[owner_membership, None])

        member = await service.add_member(
            manager, project.id, MemberAdd(email=worker.email, role="contractor")
        )

        (added,) = [call.args[0] for call in session.add.call_args_list]
        assert isinstance(added, ProjectMember)
        assert added.user_id == worker.id
        assert added.role == MembershipRole.CONTRACTOR.value
        assert added.assigned_by == manager.id
        session.commit.assert_awaited_once()

        assert member.user_id == worker.id
        assert member.profile is not None and member.profile.full_name == worker.full_name

        ((recipients, payload),) = outbox.pending
        assert recipients == [worker.id]
        assert payload.type.value == "project_invite"
        assert payload.message == f"{manager.full_name} invited you to {project.name}"

    async def test_unknown_email(
        self, session, stub, service, manager, project, owner_membership, visible_project
    ):
        stub(ProfileRepository, "get_by_email", return_value=None)
        stub(MemberRepository, "get_membership", return_value=owner_membership)

        with pytest.raises(NotFound, match="User not found with that email"):
            await service.add_member(manager, project.id, MemberAdd(email="ghost@example.com"))

        session.add.assert_not_called()

    async def test_unknown_user_id(
        self, stub, service, manager, project, owner_membership, visible_project
    ):
        stub(ProfileRepository, "get_by_id", return_value=None)
        stub(MemberRepository, "get_membership", return_value=owner_membership)

        with pytest.raises(NotFound, match="User not found"):
            await service.add_member(
                manager, project.id, MemberAdd(user_id=ProfileFactory.worker().id)
            )

    async def test_existing_member(
        self, session, stub, service, manager, project, owner_membership, visible_project
    ):
        worker = ProfileFactory.worker()
        existing = ProjectMemberFactory.build(project_id=project.id, user_id=worker.id)
        stub(ProfileRepository, "get_by_email", return_value=worker)
        stub(MemberRepository, "get_membership", side_effect=[owner_membership, existing])

        with pytest.raises(AlreadyMember):
            await service.add_member(manager, project.id, MemberAdd(email=worker.email))

        session.commit.assert_not_awaited()

    async def test_concurrent_duplicate_maps_to_already_member(
        self, session, stub, service, manager, project, owner_membership, outbox, visible_project
    ):
        worker = ProfileFactory.worker()
        stub(ProfileRepository, "get_by_email", return_value=worker)
        stub(MemberRepository, "get_membership", side_effect=[owner_membership, None])
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

        with pytest.raises(AlreadyMember):
            await service.add_member(manager, project.id, MemberAdd(email=worker.email))

        session.rollback.assert_awaited_once()
        assert outbox.pending == []

    async def test_worker_member_cannot_add(self, session, stub, project, outbox, visible_project):
        worker = ProfileFactory.worker()
        membership = ProjectMemberFactory.build(project_id=project.id, user_id=worker.id)
        stub(MemberRepository, "get_membership", return_value=membership)
        service = MembershipService(DataScope(session, viewer_id=worker.id), outbox)

        with pytest.raises(Forbidden):
            await service.add_member(worker, project.id, MemberAdd(email="new@example.com"))

    async def test_invisible_project(self, stub, service, manager, project):
        stub(ProjectRepository, "get_by_id", return_value=None)

        with pytest.raises(NotFound, match="Project not found"):
            await service.add_member(manager, project.id, MemberAdd(email="new@example.com"))


class TestRemoveMember:
    async def test_removes_member(
        self, session, stub, service, manager, project, owner_membership, visible_project
    ):
        target = ProjectMemberFactory.contractor(
            project_id=project.id, user_id=ProfileFactory.contractor().id
        )
        stub(MemberRepository, "get_in_project", return_value=target)
        stub(MemberRepository, "get_membership", return_value=owner_membership)
        delete = stub(MemberRepository, "delete")

        await service.remove_member(manager, project.id, target.id)

        delete.assert_awaited_once_with(target)
        session.commit.assert_awaited_once()

    async def test_owner_cannot_be_removed(
        self, session, stub, project, manager, owner_membership, outbox, visible_project
    ):
        admin = ProfileFactory.admin()
        stub(MemberRepository, "get_in_project", return_value=owner_membership)
        delete = stub(MemberRepository, "delete")
        service = MembershipService(DataScope(session, viewer_id=admin.id), outbox)

        with pytest.raises(CannotRemoveOwner):
            await service.remove_member(admin, project.id, owner_membership.id)

        delete.assert_not_awaited()

    async def test_member_of_other_project(self, stub, service, manager, project, visible_project):
        stub(MemberRepository, "get_in_project", return_value=None)

        with pytest.raises(NotFound, match="Member not found"):
            await service.remove_member(manager, project.id, project.id)

    async def test_contractor_member_cannot_remove(
        self, session, stub, project, outbox, visible_project
    ):
        contractor = ProfileFactory.contractor()
        caller_membership = ProjectMemberFactory.contractor(
            project_id=project.id, user_id=contractor.id
        )
        target = ProjectMemberFactory.build(
            project_id=project.id, user_id=ProfileFactory.worker().id
        )
        stub(MemberRepository, "get_in_project", return_value=target)
        stub(MemberRepository, "get_membership", return_value=caller_membership)
        delete = stub(MemberRepository, "delete")
        service = MembershipService(DataScope(session, viewer_id=contractor.id), outbox)

        with pytest.raises(Forbidden):
            await service.remove_member(contractor, project.id, target.id)

        delete.assert_not_awaited()
