"""广播发布路由：只负责入队，扇出由队列触发。"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_publisher
from application.dtos.broadcast import PublishRequest, PublishResponse
from application.ports.queue import BroadcastQueuePort
from core.response import Response as ApiResponse, success_response


router = APIRouter(
    prefix="/broadcast",
    tags=["广播"],
)


@router.post(
    "",
    summary="发布广播消息",
    response_model=ApiResponse[PublishResponse],
    status_code=202,
)
async def publish_broadcast(
    payload: PublishRequest,
    publisher: BroadcastQueuePort = Depends(get_publisher),
):
    message_id = await publisher.publish(payload.to_message())
    return success_response(data=PublishResponse(message_id=message_id), message="Broadcast accepted")
