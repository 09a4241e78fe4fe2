"""Options and data of mailbox commands: LIST, NAMESPACE, SELECT, STATUS, STORE."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional


@dataclass
class StatusOptions:
    """Items requested by the STATUS command."""

    num_messages: bool = False
    uid_next: bool = False
    uid_validity: bool = False
    num_unseen: bool = False
    num_deleted: bool = False  # requires IMAP4rev2 or QUOTA
    size: bool = False  # requires IMAP4rev2 or STATUS=SIZE

    append_limit: bool = False  # requires APPENDLIMIT
    deleted_storage: bool = False  # requires QUOTA=RES-STORAGE
    highest_mod_seq: bool = False  # requires CONDSTORE


@dataclass
class StatusData:
    """Result of a STATUS command; optional items are None when absent."""

    mailbox: str

    num_messages: Optional[int] = None
    uid_next: int = 0
    uid_validity: int = 0
    num_unseen: Optional[int] = None
    num_deleted: Optional[int] = None
    size: Optional[int] = None

    append_limit: Optional[int] = None
    deleted_storage: Optional[int] = None
    highest_mod_seq: int = 0


@dataclass
class ListOptions:
    """Selection and return options of the LIST command."""

    select_subscribed: bool = False
    select_remote: bool = False
    select_recursive_match: bool = False  # requires select_subscribed
    select_special_use: bool = False  # requires SPECIAL-USE

    return_subscribed: bool = False
    return_children: bool = False
    return_status: Optional[StatusOptions] = None  # requires IMAP4rev2 or LIST-STATUS
    return_special_use: bool = False  # requires SPECIAL-USE


@dataclass
class ListDataChildInfo:
    subscribed: bool = False


@dataclass
class ListData:
    """A mailbox returned by LIST. delim is None when the server sends NIL."""

    mailbox: str
    attrs: list[str] = field(default_factory=list)
    delim: Optional[str] = None

    child_info: Optional[ListDataChildInfo] = None
    old_name: str = ""
    status: Optional[StatusData] = None


@dataclass
class NamespaceDescriptor:
    prefix: str
    delim: Optional[str] = None


@dataclass
class NamespaceData:
    """Result of the NAMESPACE command."""

    personal: list[NamespaceDescriptor] = field(default_factory=list)
    other: list[NamespaceDescriptor] = field(default_factory=list)
    shared: list[NamespaceDescriptor] = field(default_factory=list)


@dataclass
class SelectOptions:
    read_only: bool = False
    cond_store: bool = False  # requires CONDSTORE


@dataclass
class SelectData:
    """Result of SELECT or EXAMINE."""

    flags: list[str] = field(default_factory=list)
    permanent_flags: list[str] = field(default_factory=list)
    num_messages: int = 0
    uid_next: int = 0
    uid_validity: int = 0

    list: Optional[ListData] = None  # requires IMAP4rev2

    highest_mod_seq: int = 0  # requires CONDSTORE


@dataclass
class StoreOptions:
    unchanged_since: int = 0  # requires CONDSTORE


class StoreFlagsOp(IntEnum):
    SET = 0
    ADD = 1
    DEL = 2


@dataclass
class StoreFlags:
    """A change to message flags."""

    op: StoreFlagsOp = StoreFlagsOp.SET
    silent: bool = False
    flags: list[str] = field(default_factory=list)


class ThreadAlgorithm(str, Enum):
    ORDERED_SUBJECT = "ORDEREDSUBJECT"
    REFERENCES = "REFERENCES"

    def __str__(self) -> str:
        return self.value


class QuotaResourceType(str, Enum):
    """QUOTA resource types (RFC 9208 section 5)."""

    STORAGE = "STORAGE"
    MESSAGE = "MESSAGE"
    MAILBOX = "MAILBOX"
    ANNOTATION_STORAGE = "ANNOTATION-STORAGE"

    def __str__(self) -> str:
        return self.value