"""Status responses and the error raised for them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class StatusResponseType(str, Enum):
    OK = "OK"
    NO = "NO"
    BAD = "BAD"
    PREAUTH = "PREAUTH"
    BYE = "BYE"

    def __str__(self) -> str:
        return self.value


class ResponseCode(str, Enum):
    ALERT = "ALERT"
    ALREADY_EXISTS = "ALREADYEXISTS"
    AUTHENTICATION_FAILED = "AUTHENTICATIONFAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATIONFAILED"
    BAD_CHARSET = "BADCHARSET"
    CANNOT = "CANNOT"
    CLIENT_BUG = "CLIENTBUG"
    CONTACT_ADMIN = "CONTACTADMIN"
    CORRUPTION = "CORRUPTION"
    EXPIRED = "EXPIRED"
    HAS_CHILDREN = "HASCHILDREN"
    IN_USE = "INUSE"
    LIMIT = "LIMIT"
    NON_EXISTENT = "NONEXISTENT"
    NO_PERM = "NOPERM"
    OVER_QUOTA = "OVERQUOTA"
    PARSE = "PARSE"
    PRIVACY_REQUIRED = "PRIVACYREQUIRED"
    SERVER_BUG = "SERVERBUG"
    TRY_CREATE = "TRYCREATE"
    UNAVAILABLE = "UNAVAILABLE"
    UNKNOWN_CTE = "UNKNOWN-CTE"

    # METADATA
    TOO_MANY = "TOOMANY"
    NO_PRIVATE = "NOPRIVATE"

    # APPENDLIMIT
    TOO_BIG = "TOOBIG"

    def __str__(self) -> str:
        return self.value


def _wire(value: Union[Enum, str]) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass
class StatusResponse:
    """A generic status response (RFC 9051 section 7.1)."""

    type: Union[StatusResponseType, str]
    code: Optional[Union[ResponseCode, str]] = None
    text: str = ""


class IMAPError(Exception):
    """An error reported by a status response."""

    def __init__(
        self,
        type: Union[StatusResponseType, str],
        code: Optional[Union[ResponseCode, str]] = None,
        text: str = "",
    ) -> None:
        self.type = type
        self.code = code
        self.text = text
        super().__init__(str(self))

    @classmethod
    def from_response(cls, response: StatusResponse) -> IMAPError:
        return cls(response.type, response.code, response.text)

    @property
    def response(self) -> StatusResponse:
        return StatusResponse(self.type, self.code, self.text)

    def __str__(self) -> str:
        parts = [f"imap: {_wire(self.type)}"]
        if self.code:
            parts.append(f"[{_wire(self.code)}]")
        parts.append(self.text or "<unknown>")
        return " ".join(parts)