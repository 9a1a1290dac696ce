"""HTTP client for the ChamberMaster member directory."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from chambersync.adapters.http_resilience import ResilienceConfig, ResilientClient
from chambersync.domain.errors import DirectoryRequestError
from chambersync.domain.ports.fetching import MemberDirectory

from .schema import DetailedMembersResponse, ListMembersResponse
from .translator import translate_detailed_members, translate_list_members

if TYPE_CHECKING:
    from collections.abc import Callable

    from chambersync.domain.model import DirectoryMember

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def members_path(account_id: str) -> str:
    return f"/associations({account_id})/members/"


def member_details_path(account_id: str) -> str:
    return f"/associations({account_id})/members/details"


@dataclass(slots=True)
class ChamberMasterDirectory:
    """Live directory backed by the ChamberMaster REST API.

    Each call opens its own client and runs to completion; nothing is cached
    and nothing is retried.
    """

    resilience: ResilienceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def fetch_detailed(self, account_id: str) -> list[DirectoryMember]:
        return asyncio.run(self._fetch_detailed_async(account_id))

    def fetch_list(
        self,
        account_id: str,
        status_filter: int | None = None,
    ) -> list[DirectoryMember]:
        return asyncio.run(self._fetch_list_async(account_id, status_filter))

    async def _fetch_detailed_async(self, account_id: str) -> list[DirectoryMember]:
        payload = await self._get_json(member_details_path(account_id), params=None)
        try:
            members = DetailedMembersResponse.validate_python(payload)
        except ValidationError as exc:
            log.error(f"Unexpected ChamberMaster member details payload: {exc}")
            raise DirectoryRequestError from exc
        return translate_detailed_members(members)

    async def _fetch_list_async(
        self,
        account_id: str,
        status_filter: int | None,
    ) -> list[DirectoryMember]:
        params = {"$filter": f"Status eq {status_filter}"} if status_filter else None
        payload = await self._get_json(members_path(account_id), params=params)
        try:
            members = ListMembersResponse.validate_python(payload)
        except ValidationError as exc:
            log.error(f"Unexpected ChamberMaster members payload: {exc}")
            raise DirectoryRequestError from exc
        return translate_list_members(members)

    async def _get_json(self, path: str, *, params: dict[str, str] | None) -> object:
        try:
            async with self.client_factory(self.resilience) as client:
                response = await client.get(path, params=params)
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            log.error(f"ChamberMaster request {path} failed: {exc}")
            raise DirectoryRequestError from exc


if TYPE_CHECKING:
    _directory_check: MemberDirectory = ChamberMasterDirectory(ResilienceConfig(name="check"))
