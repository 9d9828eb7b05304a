from models.base_model import Base, BaseModel
from sqlalchemy import Column, Index, String, Text


class Member(BaseModel, Base):
    __tablename__ = "members"
    login_id = Column(String(50), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=True)
    image = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    # Single whitelisted refresh token; a presented token must equal this value.
    # Unbounded: JWTs for non-ASCII login ids run past 512 chars
    refresh_token = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_members_refresh_token", "refresh_token", postgresql_using="hash"),
    )

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")

    def update_refresh_token(self, refresh_token):
        self.refresh_token = refresh_token

    def __repr__(self):
        return f"<Member id={self.id} login_id={self.login_id}>"
