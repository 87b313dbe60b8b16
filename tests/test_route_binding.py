import pytest

from application.dtos.deployment import DEFAULT_REASON, CustomResourceEvent
from application.services.route_binding_service import RouteBindingError, RouteBindingService
from infrastructure.external.apigateway import ApiGatewayRouteAdmin


pytestmark = pytest.mark.asyncio


class FakeRouteAdmin:
    def __init__(self, routes):
        self.routes = routes
        self.updates = []

    async def list_routes(self, api_id):
        return list(self.routes)

    async def update_route_authorizer(self, api_id, route_id, authorizer_id):
        self.updates.append((api_id, route_id, authorizer_id))


def _event(request_type="Create", **properties):
    return CustomResourceEvent.model_validate({
        "RequestType": request_type,
        "StackId": "stack-1",
        "RequestId": "req-1",
        "LogicalResourceId": "UpdateConnectRoute",
        "ResourceProperties": properties,
        "ResponseURL": "https://example.com/signed",
    })


_ROUTES = [
    {"RouteId": "r-default", "RouteKey": "$default"},
    {"RouteId": "r-connect", "RouteKey": "$connect", "AuthorizationType": "NONE"},
]


async def test_create_binds_connect_route():
    admin = FakeRouteAdmin(_ROUTES)
    service = RouteBindingService(routes=admin)

    response = await service.handle(_event(ApiId="api-1", AuthorizerId="auth-1"))

    assert admin.updates == [("api-1", "r-connect", "auth-1")]
    body = response.to_cloudformation()
    assert body["Status"] == "SUCCESS"
    assert body["Data"] == {"RouteId": "r-connect"}
    assert body["PhysicalResourceId"] == "UpdateConnectRoute"
    assert (body["StackId"], body["RequestId"]) == ("stack-1", "req-1")
    assert body["Reason"] == DEFAULT_REASON


async def test_already_bound_route_is_not_updated_again():
    admin = FakeRouteAdmin([
        {"RouteId": "r-connect", "RouteKey": "$connect", "AuthorizationType": "CUSTOM", "AuthorizerId": "auth-1"},
    ])
    response = await RouteBindingService(routes=admin).handle(_event("Update", ApiId="api-1", AuthorizerId="auth-1"))

    assert response.status == "SUCCESS"
    assert admin.updates == []


async def test_delete_is_acknowledged_without_calls():
    admin = FakeRouteAdmin(_ROUTES)
    response = await RouteBindingService(routes=admin).handle(_event("Delete", ApiId="api-1", AuthorizerId="auth-1"))

    assert response.status == "SUCCESS"
    assert admin.updates == []


async def test_missing_ids_fail():
    admin = FakeRouteAdmin(_ROUTES)
    response = await RouteBindingService(routes=admin).handle(_event(ApiId="api-1"))

    assert response.status == "FAILED"
    assert response.reason == "Missing required IDs for route update"


async def test_missing_connect_route_fails():
    admin = FakeRouteAdmin([{"RouteId": "r-default", "RouteKey": "$default"}])
    with pytest.raises(RouteBindingError, match=r"\$connect route not found"):
        await RouteBindingService(routes=admin).bind("api-1", "auth-1")


async def test_route_admin_follows_pagination():
    class FakeClient:
        def __init__(self):
            self.calls = []

        def get_routes(self, **kwargs):
            self.calls.append(kwargs)
            if "NextToken" not in kwargs:
                return {"Items": [{"RouteId": "r1"}], "NextToken": "t1"}
            return {"Items": [{"RouteId": "r2"}]}

        def update_route(self, **kwargs):
            self.calls.append(kwargs)

    client = FakeClient()
    admin = ApiGatewayRouteAdmin(client)

    routes = await admin.list_routes("api-1")
    await admin.update_route_authorizer("api-1", "r2", "auth-1")

    assert [r["RouteId"] for r in routes] == ["r1", "r2"]
    assert client.calls[1] == {"ApiId": "api-1", "NextToken": "t1"}
    assert client.calls[2] == {
        "ApiId": "api-1", "RouteId": "r2", "AuthorizationType": "CUSTOM", "AuthorizerId": "auth-1",
    }
