"""
Typed failures raised by the member service and the token codec.
api.errors turns each one into the JSON error envelope using code/status/message.
"""


class MemberError(Exception):
    code = "MEMBER_ERROR"
    status = 400
    default_message = "Member operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MemberNotFound(MemberError):
    code = "MEMBER_NOT_FOUND"
    status = 404
    default_message = "Member not found"


class MemberAlreadyExists(MemberError):
    code = "MEMBER_ALREADY_EXISTS"
    status = 409
    default_message = "Login id already registered"


class MemberNotModified(MemberError):
    code = "MEMBER_NOT_MODIFIED"
    default_message = "Member could not be modified"


class MemberNotRemoved(MemberError):
    code = "MEMBER_NOT_REMOVED"
    default_message = "Member could not be removed"


class MemberImageNotModified(MemberError):
    code = "MEMBER_IMAGE_NOT_MODIFIED"
    default_message = "Member image could not be modified"


class LoginDenied(MemberError):
    code = "MEMBER_LOGIN_DENIED"
    status = 401
    default_message = "Login denied"


class RefreshTokenExpired(MemberError):
    code = "MEMBER_REFRESH_TOKEN_EXPIRED"
    status = 401
    default_message = "Refresh token expired, please log in again"


class TokenError(Exception):
    code = "INVALID_TOKEN"
    status = 401


class TokenExpired(TokenError):
    code = "TOKEN_EXPIRED"


class TokenInvalid(TokenError):
    pass
