"""Ports for reading the external member directory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chambersync.domain.model import DirectoryMember


@runtime_checkable
class MemberDirectory(Protocol):
    """Source of directory member records for one chamber account.

    Implementations raise ``DirectoryRequestError`` for any failure and never
    return partial results.
    """

    def fetch_detailed(self, account_id: str) -> list[DirectoryMember]: ...

    def fetch_list(
        self,
        account_id: str,
        status_filter: int | None = None,
    ) -> list[DirectoryMember]: ...


__all__ = ["MemberDirectory"]
