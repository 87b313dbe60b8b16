"""
运维 HTTP API 入口（FastAPI）

查看连接注册表、手动注销连接、向广播队列发布消息。
WebSocket 本身由托管网关终止，这里不处理会话。
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import build_relay_services
from api.middleware import RequestIDMiddleware, LoggingMiddleware
from api.routes import broadcast as broadcast_routes
from api.routes import connections as connection_routes
from core.config import settings
from core.exceptions import register_exception_handlers
from core.logging_config import get_logger, configure_logging
from core.response import success_response
from infrastructure.external.aws import shutdown_clients
from infrastructure.external.push import shutdown_push_clients


# 初始化日志：在入口处显式配置，避免模块导入时的副作用
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    app.state.relay = build_relay_services(settings)
    logger.info(
        "relay_initialized",
        registry="dynamodb" if settings.use_dynamodb else "memory",
        publisher="sqs" if settings.QUEUE_URL else "inprocess",
        endpoint=app.state.relay.broadcast.endpoint,
    )

    yield

    shutdown_push_clients()
    shutdown_clients()
    logger.info("application_shutdown", message="Application shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="WebSocket 中继运维接口",
)

# 添加中间件（注意顺序：从下往上执行）
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册全局异常处理器
register_exception_handlers(app)


# 注册路由
app.include_router(connection_routes.router, prefix="/api/v1")
app.include_router(broadcast_routes.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
async def root():
    """API根路径"""
    return success_response(
        data={
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs": "/docs",
            "redoc": "/redoc"
        },
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """健康检查端点"""
    return success_response(data={"status": "healthy"})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
