"""Public interface for the ChamberMaster directory adapter."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from chambersync.config import get_chambermaster_config

from .client import ChamberMasterDirectory, member_details_path, members_path
from .fixture import MOCK_DATA_ERROR, FixtureMemberDirectory
from .schema import DetailedMemberPayload, FixtureDocument, ListMemberPayload
from .translator import translate_detailed_member, translate_list_member

if TYPE_CHECKING:
    from chambersync.config import ChamberMasterConfig
    from chambersync.domain.ports.fetching import MemberDirectory

log = getLogger(__name__)


def build_member_directory(
    *,
    api_key: str,
    base_url: str | None = None,
    config: ChamberMasterConfig | None = None,
) -> MemberDirectory:
    """Return the mock or live directory, as configured for the process."""

    resolved = config or get_chambermaster_config()
    if resolved.mock:
        log.info("ChamberMaster directory in MOCK mode (%s)", resolved.mock_path)
        return FixtureMemberDirectory(resolved.mock_path)
    log.info("ChamberMaster directory in LIVE mode")
    return ChamberMasterDirectory(resolved.resilience_for(api_key=api_key, base_url=base_url))


__all__ = [
    "MOCK_DATA_ERROR",
    "ChamberMasterDirectory",
    "DetailedMemberPayload",
    "FixtureDocument",
    "FixtureMemberDirectory",
    "ListMemberPayload",
    "build_member_directory",
    "member_details_path",
    "members_path",
    "translate_detailed_member",
    "translate_list_member",
]
