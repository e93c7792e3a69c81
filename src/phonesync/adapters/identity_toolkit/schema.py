"""Identity Toolkit request and response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class IdentityToolkitModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def to_body(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


class LookupAccountsRequest(IdentityToolkitModel):
    local_ids: list[str] = Field(alias="localId")


class CreateAccountRequest(IdentityToolkitModel):
    local_id: str = Field(alias="localId")
    email: str
    password: str
    phone_number: str = Field(alias="phoneNumber")


class UpdateAccountRequest(IdentityToolkitModel):
    local_id: str = Field(alias="localId")
    email: str | None = None
    password: str | None = None
    phone_number: str | None = Field(default=None, alias="phoneNumber")


class UserInfo(IdentityToolkitModel):
    local_id: str = Field(alias="localId")
    email: str | None = None
    phone_number: str | None = Field(default=None, alias="phoneNumber")


class LookupAccountsResponse(IdentityToolkitModel):
    users: list[UserInfo] = Field(default_factory=list)


class AccountResponse(IdentityToolkitModel):
    """Body returned by account creation and update."""

    local_id: str = Field(alias="localId")
    email: str | None = None
    phone_number: str | None = Field(default=None, alias="phoneNumber")


class ErrorDetail(IdentityToolkitModel):
    code: int
    message: str
    status: str | None = None


class ErrorResponse(IdentityToolkitModel):
    error: ErrorDetail
