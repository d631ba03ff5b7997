"""
FastAPI应用主入口
"""
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from api.routes import attendance as attendance_routes
from api.routes import chain as chain_routes
from api.routes import classes as classes_routes
from api.routes import payments as payments_routes
from api.middleware import RequestIDMiddleware, LoggingMiddleware
from core.config import Settings, settings as default_settings
from core.exceptions import register_exception_handlers
from core.response import success_response
from core.logging_config import get_logger, configure_logging
from infrastructure.bootstrap import Marketplace, build_marketplace


# 初始化日志：在入口处显式配置
configure_logging()
logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    marketplace: Optional[Marketplace] = None,
) -> FastAPI:
    """构建应用；测试可注入独立的配置与市场服务图"""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        if getattr(app.state, "marketplace", None) is None:
            app.state.marketplace = build_marketplace(settings)
        logger.info(
            "application_started",
            environment=settings.ENVIRONMENT,
            block_height=app.state.marketplace.clock.current_height(),
        )
        yield
        logger.info("application_shutdown", message="Application shutdown")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        description="课程市场：课程注册、支付托管拆分、退款争议与签到",
    )
    app.state.marketplace = marketplace

    # 添加中间件（注意顺序：后添加的先执行）
    # RequestID 最先执行，为日志中间件提供 request_id
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    # CORS中间件
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
    app.include_router(payments_routes.router, prefix="/api/v1")
    app.include_router(classes_routes.router, prefix="/api/v1")
    app.include_router(attendance_routes.router, prefix="/api/v1")
    app.include_router(chain_routes.router, prefix="/api/v1")

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
            message="Welcome",
        )

    @app.get("/health", tags=["Health"])
    async def health_check():
        """健康检查端点"""
        return success_response(data={"status": "healthy"}, message="OK")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG,
        log_level="debug" if default_settings.DEBUG else "info"
    )
