"""Directory member shapes and their normalisation.

The external directory returns two shapes of the same concept: the list shape
(``/members``) and the richer detail shape (``/members/details``). Both are
modelled as one tagged union and reduced to a ``MappedMember`` by
``normalize_member``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import Literal

from .enums import DirectoryStatusCode, MemberStatus

log = getLogger(__name__)

_INACTIVE_CODES = frozenset({DirectoryStatusCode.INACTIVE, DirectoryStatusCode.DELETED})
_KNOWN_CODES = frozenset(code.value for code in DirectoryStatusCode)


@dataclass(frozen=True, slots=True, kw_only=True)
class ListedDirectoryMember:
    external_id: str
    name: str
    status_code: int
    display_name: str | None = None
    email: str | None = None
    kind: Literal["list"] = "list"


@dataclass(frozen=True, slots=True, kw_only=True)
class DetailedDirectoryMember:
    external_id: str
    name: str
    status_code: int
    display_name: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    categories: tuple[str, ...] = field(default_factory=tuple)
    primary_contact: str | None = None
    kind: Literal["detail"] = "detail"


type DirectoryMember = ListedDirectoryMember | DetailedDirectoryMember


@dataclass(frozen=True, slots=True, kw_only=True)
class MappedMember:
    """Directory-owned fields of a chamber member record."""

    external_member_id: str
    business_name: str
    member_status: MemberStatus
    member_status_code: int
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    website_url: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    category: str | None = None


def map_status_code(code: int) -> MemberStatus:
    """Collapse a directory status code into the local tri-state status.

    Codes outside the known set fall through to ``active``.
    """

    if code not in _KNOWN_CODES:
        log.warning("Unknown directory status code %s, treating member as active", code)
        return MemberStatus.ACTIVE
    if code in _INACTIVE_CODES:
        return MemberStatus.INACTIVE
    if code == DirectoryStatusCode.PROSPECTIVE:
        return MemberStatus.PROSPECTIVE
    return MemberStatus.ACTIVE


def normalize_member(member: DirectoryMember) -> MappedMember:
    business_name = (member.display_name or "").strip() or member.name
    status = map_status_code(member.status_code)
    match member:
        case DetailedDirectoryMember():
            return MappedMember(
                external_member_id=member.external_id,
                business_name=business_name,
                member_status=status,
                member_status_code=member.status_code,
                contact_name=member.primary_contact,
                email=member.email,
                phone=member.phone,
                website_url=member.website,
                address_line1=member.address_line1,
                address_line2=member.address_line2,
                city=member.city,
                state=member.state,
                zip_code=member.zip_code,
                category=member.categories[0] if member.categories else None,
            )
        case ListedDirectoryMember():
            return MappedMember(
                external_member_id=member.external_id,
                business_name=business_name,
                member_status=status,
                member_status_code=member.status_code,
                email=member.email,
            )
