"""
MemberRepository: lookups and writes for Member rows on top of DBStorage.

Every finder returns the matching Member or None; absence is never an exception here.
Database errors (IntegrityError and friends) propagate to the caller unchanged.
"""
from __future__ import annotations

from typing import Optional

from models.db_storage import DBStorage
from models.member import Member


class MemberRepository:
    def __init__(self, storage: DBStorage):
        self.storage = storage

    def _query(self):
        return self.storage.get_session().query(Member)

    def find_by_id(self, member_id) -> Optional[Member]:
        if member_id is None:
            return None
        return self.storage.get(Member, member_id)

    def find_by_login_id(self, login_id: str) -> Optional[Member]:
        return self._query().filter(Member.login_id == login_id).first()

    def find_by_email(self, email: str) -> Optional[Member]:
        return self._query().filter(Member.email == email).first()

    def find_by_login_id_and_email(self, login_id: str, email: str) -> Optional[Member]:
        return (
            self._query()
            .filter(Member.login_id == login_id, Member.email == email)
            .first()
        )

    def find_by_refresh_token(self, refresh_token: str) -> Optional[Member]:
        if not refresh_token:
            return None
        return self._query().filter(Member.refresh_token == refresh_token).first()

    def count(self) -> int:
        return self.storage.count(Member)

    def save(self, member: Member) -> Member:
        self.storage.new(member)
        self.storage.save()
        return member

    def delete(self, member: Member) -> None:
        self.storage.delete(member)
        self.storage.save()
