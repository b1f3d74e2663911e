from typing import List, Optional

from sqlalchemy.orm import Session

from linkfolio.models.team import Team, TeamMember, TeamInvite


class TeamRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, team_id: str) -> Optional[Team]:
        return self.db.query(Team).filter(Team.id == team_id).first()

    def list_members(self, team_id: str) -> List[TeamMember]:
        return (
            self.db.query(TeamMember)
            .filter(TeamMember.team_id == team_id)
            .order_by(TeamMember.created_at.asc(), TeamMember.id.asc())
            .all()
        )

    def get_member(self, member_id: str, team_id: str) -> Optional[TeamMember]:
        return (
            self.db.query(TeamMember)
            .filter(TeamMember.id == member_id, TeamMember.team_id == team_id)
            .first()
        )

    def find_member(self, member_id: str) -> Optional[TeamMember]:
        return self.db.query(TeamMember).filter(TeamMember.id == member_id).first()

    def get_member_by_user(self, user_id: str, team_id: str) -> Optional[TeamMember]:
        return (
            self.db.query(TeamMember)
            .filter(TeamMember.user_id == user_id, TeamMember.team_id == team_id)
            .first()
        )

    def get_member_by_email(self, email: str, team_id: str) -> Optional[TeamMember]:
        return (
            self.db.query(TeamMember)
            .filter(TeamMember.email == email.strip().lower(), TeamMember.team_id == team_id)
            .first()
        )

    def get_invite_by_token(self, token: str) -> Optional[TeamInvite]:
        return self.db.query(TeamInvite).filter(TeamInvite.token == token).first()

    def delete_invites_for_member(self, member_id: str) -> None:
        self.db.query(TeamInvite).filter(TeamInvite.member_id == member_id).delete(synchronize_session=False)

    def add(self, item):
        """Stage a row without committing; the service owns the transaction."""
        self.db.add(item)
        self.db.flush()
        return item

    def commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def remove(self, item) -> None:
        self.db.delete(item)
        self.db.flush()
