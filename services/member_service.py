"""
MemberService: member CRUD plus the login / token lifecycle.

Login is two-phase: login() only authenticates, the caller then issues tokens
with generate_access_token() / generate_refresh_token() and persists the
refresh token with set_refresh_token(). refresh_access_token() only reads the
stored refresh token; each member has at most one whitelisted refresh token.

The refresh-token field is read and written without locking, so two
concurrent logins for the same member race and the last write wins.
"""
from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

from werkzeug.utils import secure_filename

from models.member import Member
from models.member_repository import MemberRepository
from services.exceptions import (
    LoginDenied,
    MemberAlreadyExists,
    MemberImageNotModified,
    MemberNotFound,
    MemberNotModified,
    MemberNotRemoved,
    RefreshTokenExpired,
    TokenExpired,
)
from utils.security import (
    ACCESS,
    REFRESH,
    Argon2PasswordEncoder,
    TokenCodec,
    generate_temp_password,
)

logger = logging.getLogger(__name__)

ROLE_ADMIN = "ROLE_ADMIN"
ROLE_MEMBER = "ROLE_MEMBER"

ADMIN_LOGIN_ID = "admin"
# Not claimable through registration or profile updates; see MemberService.seed_admin()
RESERVED_LOGIN_IDS = (ADMIN_LOGIN_ID,)


@dataclass(frozen=True)
class LoginResult:
    """Public profile returned by a successful login."""

    id: int
    login_id: str
    name: Optional[str]
    image: Optional[str]
    email: Optional[str]

    @classmethod
    def from_member(cls, member: Member) -> "LoginResult":
        return cls(
            id=member.id,
            login_id=member.login_id,
            name=member.name,
            image=member.image,
            email=member.email,
        )


def authorities_for(login_id: str) -> list[str]:
    # TODO: read authorities from a role column on Member instead of matching the login id
    if login_id == ADMIN_LOGIN_ID:
        return [ROLE_ADMIN]
    return [ROLE_MEMBER]


class MemberService:
    def __init__(
        self,
        repository: MemberRepository,
        password_encoder: Argon2PasswordEncoder,
        token_codec: TokenCodec,
        upload_dir: str = "upload",
        access_ttl_days: float = 1,
        refresh_ttl_days: float = 3,
    ):
        self.repository = repository
        self.password_encoder = password_encoder
        self.token_codec = token_codec
        self.upload_dir = upload_dir
        self.access_ttl_days = access_ttl_days
        self.refresh_ttl_days = refresh_ttl_days

    @classmethod
    def from_app(cls, app, storage, password_encoder=None) -> "MemberService":
        config = app.config
        return cls(
            repository=MemberRepository(storage),
            password_encoder=password_encoder or Argon2PasswordEncoder(),
            token_codec=TokenCodec.from_config(config),
            upload_dir=config.get("UPLOAD_DIR", "upload"),
            access_ttl_days=config.get("ACCESS_TOKEN_EXPIRE_DAYS", 1),
            refresh_ttl_days=config.get("REFRESH_TOKEN_EXPIRE_DAYS", 3),
        )

    # --- members ---

    def create(self, login_id: str, password: str, name: str | None = None,
               email: str | None = None, image: str | None = None) -> Member:
        if self.repository.find_by_login_id(login_id) is not None:
            raise MemberAlreadyExists()
        member = Member(
            login_id=login_id,
            password_hash=self.password_encoder.encode(password),
            name=name,
            email=email,
            image=image,
        )
        self.repository.save(member)
        logger.info("Registered member id=%s", member.id)
        return member

    def read(self, member_id: int) -> Member:
        member = self.repository.find_by_id(member_id)
        if member is None:
            raise MemberNotFound()
        return member

    def update(self, member_id: int, login_id: str | None = None, password: str | None = None,
               name: str | None = None, image: str | None = None, email: str | None = None) -> Member:
        """Replace every field that is given; None keeps the stored value."""
        member = self.repository.find_by_id(member_id)
        if member is None:
            raise MemberNotModified()
        if login_id is not None and login_id != member.login_id:
            if self.repository.find_by_login_id(login_id) is not None:
                raise MemberAlreadyExists()
            member.login_id = login_id
        if password is not None:
            member.password_hash = self.password_encoder.encode(password)
        if name is not None:
            member.name = name
        if image is not None:
            member.image = image
        if email is not None:
            member.email = email
        return self.repository.save(member)

    def delete(self, member_id: int) -> None:
        member = self.repository.find_by_id(member_id)
        if member is None:
            raise MemberNotRemoved()
        self.repository.delete(member)
        logger.info("Deleted member id=%s", member_id)

    def change_image(self, member_id: int, image_file) -> Member:
        """Store an uploaded file (werkzeug FileStorage) and point the member at it."""
        member = self.repository.find_by_id(member_id)
        if member is None:
            raise MemberImageNotModified()
        member.image = self._save_image(image_file)
        return self.repository.save(member)

    def _save_image(self, image_file) -> str:
        os.makedirs(self.upload_dir, exist_ok=True)
        original = secure_filename(image_file.filename or "") or "image"
        file_name = f"{int(time.time() * 1000)}_{original}"
        image_file.save(os.path.join(self.upload_dir, file_name))
        return file_name

    def count(self) -> int:
        return self.repository.count()

    def seed_admin(self, password: str, email: str | None = None) -> Member:
        """Create the admin account once; an existing one is left untouched."""
        existing = self.repository.find_by_login_id(ADMIN_LOGIN_ID)
        if existing is not None:
            return existing
        logger.info("Seeding admin account")
        return self.create(ADMIN_LOGIN_ID, password, name="Administrator", email=email)

    # --- authentication ---

    def login(self, login_id: str, password: str) -> LoginResult:
        member = self.repository.find_by_login_id(login_id)
        if member is None:
            raise MemberNotFound()
        if not self.password_encoder.matches(password, member.password_hash):
            logger.info("Login denied for member id=%s: password mismatch", member.id)
            raise LoginDenied()
        return LoginResult.from_member(member)

    def generate_access_token(self, member_id: int, login_id: str) -> str:
        return self.token_codec.encode(
            ACCESS,
            self.access_ttl_days,
            {
                "id": str(member_id),
                "loginId": login_id,
                "authorities": authorities_for(login_id),
            },
        )

    def generate_refresh_token(self, member_id: int, login_id: str) -> str:
        return self.token_codec.encode(
            REFRESH,
            self.refresh_ttl_days,
            {"id": str(member_id), "loginId": login_id},
        )

    def set_refresh_token(self, member_id: int, refresh_token: str | None) -> None:
        member = self.repository.find_by_id(member_id)
        if member is None:
            raise MemberNotFound()
        member.update_refresh_token(refresh_token)
        self.repository.save(member)

    def refresh_access_token(self, refresh_token: str) -> str:
        # Whitelist check: only the token currently stored on a member is accepted
        member = self.repository.find_by_refresh_token(refresh_token)
        if member is None:
            logger.warning("Refresh denied: token is not whitelisted")
            raise LoginDenied()

        try:
            self.token_codec.decode(refresh_token)
        except TokenExpired:
            logger.info("Refresh token expired for member id=%s", member.id)
            raise RefreshTokenExpired()

        if member.id is None:
            raise LoginDenied()
        return self.generate_access_token(member.id, member.login_id)

    def find_login_id_by_email(self, email: str) -> str:
        member = self.repository.find_by_email(email)
        if member is None:
            raise MemberNotFound()
        return member.login_id

    def issue_temporary_password(self, login_id: str, email: str) -> str:
        """Store a fresh random password and return its plaintext; the caller delivers it."""
        member = self.repository.find_by_login_id_and_email(login_id, email)
        if member is None:
            raise MemberNotFound()
        temp_password = generate_temp_password()
        member.password_hash = self.password_encoder.encode(temp_password)
        self.repository.save(member)
        logger.info("Issued temporary password for member id=%s", member.id)
        return temp_password
