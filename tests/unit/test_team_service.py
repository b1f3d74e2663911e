"""
Service tests for teams: creation, members, invites and public visibility.
Run: pytest tests/unit/test_team_service.py -v
"""
from datetime import timedelta

import pytest
from unittest.mock import Mock
from fastapi import HTTPException

from linkfolio.core.clock import utcnow
from linkfolio.core.errors import PlanLimitExceeded
from linkfolio.core.security import verify_password
from linkfolio.models.team import TeamInvite, MEMBER_INVITED
from linkfolio.models.user import ACCOUNT_BUSINESS
from linkfolio.repositories.team_repository import TeamRepository
from linkfolio.repositories.user_repository import UserRepository
from linkfolio.schemas.team import InviteAccept, InviteCreate, MemberCreate, TeamCreate, TeamUpdate
from linkfolio.services.team_service import TeamService


@pytest.fixture
def email_service():
    service = Mock()
    service.send_member_credentials_email.return_value = True
    service.send_team_invite_email.return_value = True
    return service


@pytest.fixture
def teams(db_session, usage, email_service):
    return TeamService(TeamRepository(db_session), UserRepository(db_session), usage, email_service)


@pytest.fixture
def owner(make_user, make_plan, subscribe):
    user = make_user("owner")
    subscribe(user, make_plan("Business", max_team_members=3, account_type=ACCOUNT_BUSINESS))
    return user


def test_create_team_makes_business_owner(teams, owner, usage):
    team = teams.create_team(owner, TeamCreate(name="Acme", primary_color="#ff0000"))

    assert owner.team_id == team.id
    assert owner.account_type == ACCOUNT_BUSINESS
    members = teams.list_members(owner)
    assert len(members) == 1 and members[0].role == "owner"
    assert usage.get_limits(owner.id).current_team_members == 1


def test_create_team_twice_is_rejected(teams, owner):
    teams.create_team(owner, TeamCreate(name="Acme"))
    with pytest.raises(HTTPException) as exc:
        teams.create_team(owner, TeamCreate(name="Again"))
    assert exc.value.status_code == 400


def test_add_member_creates_account_and_emails_credentials(teams, owner, email_service, db_session):
    team = teams.create_team(owner, TeamCreate(name="Acme"))
    member = teams.add_member(owner, MemberCreate(email="Sam@Example.com", username="sam", name="Sam"))

    account = UserRepository(db_session).get_by_id(member.user_id)
    assert account.email == "sam@example.com"
    assert account.team_id == team.id
    assert account.must_change_password is True

    kwargs = email_service.send_member_credentials_email.call_args.kwargs
    assert kwargs["to_email"] == "sam@example.com"
    assert verify_password(kwargs["temporary_password"], account.hashed_password)


def test_add_member_is_gated_by_plan(teams, owner):
    teams.create_team(owner, TeamCreate(name="Acme"))
    teams.add_member(owner, MemberCreate(email="a@example.com", username="member_a"))
    teams.add_member(owner, MemberCreate(email="b@example.com", username="member_b"))

    with pytest.raises(PlanLimitExceeded) as exc:
        teams.add_member(owner, MemberCreate(email="c@example.com", username="member_c"))
    assert "3" in exc.value.message


def test_plain_member_cannot_manage(teams, owner, db_session):
    teams.create_team(owner, TeamCreate(name="Acme"))
    member = teams.add_member(owner, MemberCreate(email="m@example.com", username="member_m"))
    account = UserRepository(db_session).get_by_id(member.user_id)

    with pytest.raises(HTTPException) as exc:
        teams.invite_member(account, InviteCreate(email="x@example.com"))
    assert exc.value.status_code == 403
    with pytest.raises(HTTPException) as exc:
        teams.update_team(account, TeamUpdate(name="Hijacked"))
    assert exc.value.status_code == 403

    # any member may still read the roster
    assert len(teams.list_members(account)) == 2


def test_team_admin_can_manage(teams, owner, db_session):
    teams.create_team(owner, TeamCreate(name="Acme"))
    admin = teams.add_member(owner, MemberCreate(email="adm@example.com", username="team_admin", role="admin"))
    account = UserRepository(db_session).get_by_id(admin.user_id)

    updated = teams.update_team(account, TeamUpdate(card_template="modern"))
    assert updated.card_template == "modern"


def test_team_admin_grows_team_against_owners_plan(teams, owner, db_session):
    teams.create_team(owner, TeamCreate(name="Acme"))
    admin = teams.add_member(owner, MemberCreate(email="adm@example.com", username="team_admin", role="admin"))
    account = UserRepository(db_session).get_by_id(admin.user_id)

    # owner row + admin leave one of the owner's three seats
    invited = teams.invite_member(account, InviteCreate(email="x@example.com"))
    assert invited.status == MEMBER_INVITED

    with pytest.raises(PlanLimitExceeded) as exc:
        teams.add_member(account, MemberCreate(email="y@example.com", username="member_y"))
    assert "3 team members on the Business plan" in exc.value.message

    teams.remove_member(account, invited.id)
    added = teams.add_member(account, MemberCreate(email="y@example.com", username="member_y"))
    assert added.status == "active"
    assert len(teams.list_members(owner)) == 3


def test_remove_member_clears_team_and_counts(teams, owner, usage, db_session):
    teams.create_team(owner, TeamCreate(name="Acme"))
    member = teams.add_member(owner, MemberCreate(email="m@example.com", username="member_m"))
    removed_user_id = member.user_id
    assert usage.get_limits(removed_user_id).current_team_members == 2

    teams.remove_member(owner, member.id)

    account = UserRepository(db_session).get_by_id(removed_user_id)
    assert account.team_id is None
    assert usage.get_limits(removed_user_id).current_team_members == 0
    assert usage.get_limits(owner.id).current_team_members == 1


def test_owner_cannot_be_removed(teams, owner):
    teams.create_team(owner, TeamCreate(name="Acme"))
    owner_row = teams.list_members(owner)[0]
    with pytest.raises(HTTPException) as exc:
        teams.remove_member(owner, owner_row.id)
    assert exc.value.status_code == 400


def test_invite_and_accept(teams, owner, email_service, db_session):
    team = teams.create_team(owner, TeamCreate(name="Acme"))
    member = teams.invite_member(owner, InviteCreate(email="new@example.com", name="Newbie"))
    assert member.status == MEMBER_INVITED
    token = email_service.send_team_invite_email.call_args.kwargs["token"]

    info = teams.get_invite(token)
    assert info["team_name"] == "Acme"
    assert info["email"] == "new@example.com"

    result = teams.accept_invite(token, InviteAccept(username="newbie", password="hunter22"))
    assert result["user"].team_id == team.id
    assert result["access_token"]

    db_session.refresh(member)
    assert member.status == "active"
    with pytest.raises(HTTPException) as exc:
        teams.get_invite(token)
    assert exc.value.status_code == 400


def test_expired_invite_is_rejected(teams, owner, email_service, db_session):
    teams.create_team(owner, TeamCreate(name="Acme"))
    teams.invite_member(owner, InviteCreate(email="late@example.com"))
    token = email_service.send_team_invite_email.call_args.kwargs["token"]

    invite = db_session.query(TeamInvite).filter(TeamInvite.token == token).one()
    invite.expires_at = utcnow() - timedelta(minutes=1)
    db_session.commit()

    with pytest.raises(HTTPException) as exc:
        teams.accept_invite(token, InviteAccept(username="late_user", password="hunter22"))
    assert exc.value.status_code == 400


def test_unknown_invite_is_404(teams):
    with pytest.raises(HTTPException) as exc:
        teams.get_invite("nope")
    assert exc.value.status_code == 404


def test_public_member_only_for_active_members(teams, owner):
    teams.create_team(owner, TeamCreate(name="Acme", logo_url="https://img.example/logo.png"))
    active = teams.add_member(
        owner, MemberCreate(email="card@example.com", username="card_user", name="Card", job_title="Chef")
    )
    invited = teams.invite_member(owner, InviteCreate(email="pending@example.com"))

    card = teams.public_member(active.id)
    assert card["job_title"] == "Chef"
    assert card["team"].logo_url == "https://img.example/logo.png"
    assert "email" not in card

    with pytest.raises(HTTPException) as exc:
        teams.public_member(invited.id)
    assert exc.value.status_code == 404
