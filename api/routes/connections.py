"""连接注册表运维路由。"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_registry_service
from application.dto import ConnectionListDTO, ConnectionResponseDTO
from application.services.registry_service import RegistryService
from core.response import Response as ApiResponse, success_response
from domain.common.exceptions import ConnectionNotFoundException


router = APIRouter(
    prefix="/connections",
    tags=["连接注册表"],
)


@router.get(
    "",
    summary="列出已注册连接",
    response_model=ApiResponse[ConnectionListDTO],
)
async def list_connections(
    registry: RegistryService = Depends(get_registry_service),
):
    connections = await registry.list_connections()
    items = [ConnectionResponseDTO.from_entity(c) for c in connections]
    return success_response(data=ConnectionListDTO(items=items, total=len(items)))


@router.get(
    "/{connection_id}",
    summary="查询单个连接",
    response_model=ApiResponse[ConnectionResponseDTO],
)
async def get_connection(
    connection_id: str,
    registry: RegistryService = Depends(get_registry_service),
):
    connection = await registry.get(connection_id)
    if connection is None:
        raise ConnectionNotFoundException(connection_id)
    return success_response(data=ConnectionResponseDTO.from_entity(connection))


@router.delete(
    "/{connection_id}",
    summary="注销连接",
    response_model=ApiResponse[None],
)
async def delete_connection(
    connection_id: str,
    registry: RegistryService = Depends(get_registry_service),
):
    await registry.unregister(connection_id)
    return success_response(message="Connection removed")
