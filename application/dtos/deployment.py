"""
CloudFormation custom resource DTOs for the $connect route rebinding.
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_REASON = "See the details in CloudWatch Log"


class CustomResourceEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    request_type: str = Field(alias="RequestType")
    stack_id: str = Field(default="", alias="StackId")
    request_id: str = Field(default="", alias="RequestId")
    logical_resource_id: str = Field(default="", alias="LogicalResourceId")
    resource_properties: dict[str, Any] = Field(default_factory=dict, alias="ResourceProperties")

    @property
    def api_id(self) -> Optional[str]:
        return self.resource_properties.get("ApiId")

    @property
    def authorizer_id(self) -> Optional[str]:
        return self.resource_properties.get("AuthorizerId")


class CustomResourceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["SUCCESS", "FAILED"] = Field(alias="Status")
    reason: str = Field(default=DEFAULT_REASON, alias="Reason")
    physical_resource_id: str = Field(alias="PhysicalResourceId")
    stack_id: str = Field(alias="StackId")
    request_id: str = Field(alias="RequestId")
    logical_resource_id: str = Field(alias="LogicalResourceId")
    data: dict[str, Any] = Field(default_factory=dict, alias="Data")

    @classmethod
    def for_event(
        cls,
        event: CustomResourceEvent,
        status: Literal["SUCCESS", "FAILED"],
        data: Optional[dict[str, Any]] = None,
        reason: Optional[str] = None,
    ) -> "CustomResourceResponse":
        return cls(
            status=status,
            reason=reason or DEFAULT_REASON,
            physical_resource_id=event.logical_resource_id,
            stack_id=event.stack_id,
            request_id=event.request_id,
            logical_resource_id=event.logical_resource_id,
            data=data or {},
        )

    def to_cloudformation(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = ["DEFAULT_REASON", "CustomResourceEvent", "CustomResourceResponse"]
