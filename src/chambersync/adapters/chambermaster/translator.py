"""Translate ChamberMaster payloads into directory members."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chambersync.domain.model import DetailedDirectoryMember, ListedDirectoryMember

if TYPE_CHECKING:
    from collections.abc import Iterable

    from chambersync.domain.model import DirectoryMember

    from .schema import DetailedMemberPayload, ListMemberPayload


def translate_list_member(payload: ListMemberPayload) -> ListedDirectoryMember:
    return ListedDirectoryMember(
        external_id=payload.id,
        name=payload.name,
        status_code=payload.status,
        display_name=payload.display_name,
        email=payload.email,
    )


def translate_detailed_member(payload: DetailedMemberPayload) -> DetailedDirectoryMember:
    categories = tuple(category.name for category in payload.categories or ())
    return DetailedDirectoryMember(
        external_id=payload.id,
        name=payload.name,
        status_code=payload.status,
        display_name=payload.display_name,
        email=payload.email,
        phone=payload.phone,
        website=payload.website,
        address_line1=payload.address1,
        address_line2=payload.address2,
        city=payload.city,
        state=payload.state,
        zip_code=payload.zip,
        categories=categories,
        primary_contact=payload.primary_contact,
    )


def translate_list_members(payloads: Iterable[ListMemberPayload]) -> list[DirectoryMember]:
    return [translate_list_member(payload) for payload in payloads]


def translate_detailed_members(
    payloads: Iterable[DetailedMemberPayload],
) -> list[DirectoryMember]:
    return [translate_detailed_member(payload) for payload in payloads]
