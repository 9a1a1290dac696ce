"""Pydantic models describing ChamberMaster member payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _coerce_id(value: object) -> object:
    if isinstance(value, int):
        return str(value)
    return value


class ChamberMasterBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CategoryPayload(ChamberMasterBaseModel):
    id: int | None = Field(default=None, alias="Id")
    name: str = Field(alias="Name")


class ListMemberPayload(ChamberMasterBaseModel):
    """Member as returned by ``/associations({id})/members/``."""

    id: str = Field(alias="Id")
    name: str = Field(alias="Name")
    display_name: str | None = Field(default=None, alias="DisplayName")
    email: str | None = Field(default=None, alias="Email")
    status: int = Field(alias="Status")
    status_text: str | None = Field(default=None, alias="StatusText")

    coerce_id = field_validator("id", mode="before")(_coerce_id)
    normalize_blank = field_validator("display_name", "email", mode="before")(_blank_to_none)


class DetailedMemberPayload(ChamberMasterBaseModel):
    """Member as returned by ``/associations({id})/members/details``."""

    id: str = Field(alias="Id")
    name: str = Field(alias="Name")
    display_name: str | None = Field(default=None, alias="DisplayName")
    email: str | None = Field(default=None, alias="Email")
    phone: str | None = Field(default=None, alias="Phone")
    address1: str | None = Field(default=None, alias="Address1")
    address2: str | None = Field(default=None, alias="Address2")
    city: str | None = Field(default=None, alias="City")
    state: str | None = Field(default=None, alias="State")
    zip: str | None = Field(default=None, alias="Zip")
    website: str | None = Field(default=None, alias="Website")
    status: int = Field(alias="Status")
    status_text: str | None = Field(default=None, alias="StatusText")
    categories: list[CategoryPayload] | None = Field(default=None, alias="Categories")
    primary_contact: str | None = Field(default=None, alias="PrimaryContact")

    coerce_id = field_validator("id", mode="before")(_coerce_id)
    normalize_blank = field_validator(
        "display_name",
        "email",
        "phone",
        "address1",
        "address2",
        "city",
        "state",
        "zip",
        "website",
        "primary_contact",
        mode="before",
    )(_blank_to_none)


ListMembersResponse = TypeAdapter(list[ListMemberPayload])
DetailedMembersResponse = TypeAdapter(list[DetailedMemberPayload])


class FixtureDocument(ChamberMasterBaseModel):
    """Recorded responses used when the directory runs in mock mode."""

    members_list_response: list[ListMemberPayload] = Field(default_factory=list)
    member_details_response: list[DetailedMemberPayload] = Field(default_factory=list)
