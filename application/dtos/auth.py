"""
Authorizer DTOs for the WebSocket $connect REQUEST authorizer.
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthorizationRequest(BaseModel):
    token: Optional[str] = None
    method_arn: str = ""

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> "AuthorizationRequest":
        params = event.get("queryStringParameters") or {}
        return cls(token=params.get("token"), method_arn=event.get("methodArn") or "")


class PolicyStatement(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: str = Field(default="execute-api:Invoke", alias="Action")
    effect: Literal["Allow", "Deny"] = Field(alias="Effect")
    resource: str = Field(alias="Resource")


class PolicyDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(default="2012-10-17", alias="Version")
    statement: list[PolicyStatement] = Field(alias="Statement")


class AuthorizerResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    principal_id: str = Field(alias="principalId")
    policy_document: PolicyDocument = Field(alias="policyDocument")
    context: Optional[dict[str, Any]] = None

    @property
    def allowed(self) -> bool:
        return all(s.effect == "Allow" for s in self.policy_document.statement)

    def to_gateway(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


__all__ = ["AuthorizationRequest", "PolicyStatement", "PolicyDocument", "AuthorizerResult"]
