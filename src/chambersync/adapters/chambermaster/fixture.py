"""Directory backed by a recorded JSON document instead of the live API."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from chambersync.domain.errors import DirectoryRequestError
from chambersync.domain.ports.fetching import MemberDirectory

from .schema import FixtureDocument
from .translator import translate_detailed_members, translate_list_members

if TYPE_CHECKING:
    from pathlib import Path

    from chambersync.domain.model import DirectoryMember

log = getLogger(__name__)

MOCK_DATA_ERROR = "Mock data file not found or invalid"


@dataclass(slots=True)
class FixtureMemberDirectory:
    """Serve ``member_details_response`` and ``members_list_response`` from ``path``.

    The file is read on every call. The account id is ignored.
    """

    path: Path

    def fetch_detailed(self, account_id: str) -> list[DirectoryMember]:
        _ = account_id
        document = self._load()
        log.info(
            "Loaded %s members from mock data (details format)",
            len(document.member_details_response),
        )
        return translate_detailed_members(document.member_details_response)

    def fetch_list(
        self,
        account_id: str,
        status_filter: int | None = None,
    ) -> list[DirectoryMember]:
        _ = account_id
        members = self._load().members_list_response
        if status_filter:
            members = [member for member in members if member.status == status_filter]
        log.info("Loaded %s members from mock data (list format)", len(members))
        return translate_list_members(members)

    def _load(self) -> FixtureDocument:
        try:
            raw = self.path.read_bytes()
            return FixtureDocument.model_validate_json(raw)
        except (OSError, ValidationError) as exc:
            log.error(f"Failed to load mock ChamberMaster data from {self.path}: {exc}")
            raise DirectoryRequestError(MOCK_DATA_ERROR) from exc


if TYPE_CHECKING:
    _fixture_check: MemberDirectory = FixtureMemberDirectory(cast("Path", None))
