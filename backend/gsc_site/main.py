"""
FastAPI 主应用：路由、中间件、异常处理
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .admin_views import router as admin_router
from .crud import (
    list_companies,
    list_sections,
    list_services,
    list_statistics,
    list_testimonials,
)
from .db import dispose_engine, get_db, init_db
from .media import optimize_company_image, optimize_service_image, optimize_statistic_image
from .resources import router as resources_router
from .schemas import (
    HomePublic,
    PublicCompany,
    PublicService,
    PublicStatistic,
    SectionOut,
    TestimonialOut,
)

# 配置日志
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 创建数据库表
    init_db()
    yield
    dispose_engine()


# 创建 FastAPI 应用
app = FastAPI(
    title="GSC Capital Group Backend",
    description="集团官网内容管理后台",
    version="1.0.0",
    lifespan=lifespan,
)


def _cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "")
    return [o.strip() for o in raw.split(",") if o.strip()]


# CORS 中间件：未配置 CORS_ORIGINS 时不放行任何跨域来源
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(resources_router)
app.include_router(admin_router)


@app.get("/health")
def health_check():
    """健康检查端点"""
    return {"status": "ok", "service": "GSC Backend"}


@app.get("/api/public/home", response_model=HomePublic)
def public_home(db: Session = Depends(get_db)):
    """公开 API：首页所需的全部已启用内容"""
    try:
        companies = [
            PublicCompany.model_validate(c).model_copy(
                update={"optimized_image_url": optimize_company_image(c.image_url)}
            )
            for c in list_companies(db)
        ]
        statistics = [
            PublicStatistic.model_validate(s).model_copy(
                update={"optimized_image_url": optimize_statistic_image(s.image_url)}
            )
            for s in list_statistics(db)
        ]
        services = [
            PublicService.model_validate(s).model_copy(
                update={"optimized_image_url": optimize_service_image(s.image_url)}
            )
            for s in list_services(db)
        ]
        return HomePublic(
            companies=companies,
            statistics=statistics,
            testimonials=[TestimonialOut.model_validate(t) for t in list_testimonials(db)],
            services=services,
            sections=[SectionOut.model_validate(s) for s in list_sections(db)],
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching home data: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch home data")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """HTTP 错误统一返回 {"error": ...}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """请求体校验失败返回 400"""
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request payload",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    """500 错误处理"""
    logger.error(f"Internal server error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )
