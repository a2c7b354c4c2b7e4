"""
数据库配置和连接管理
"""
import logging
import os
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()

_engine: Optional[Engine] = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def is_production() -> bool:
    env = (os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development").strip().lower()
    return env == "production"


# Vercel 的只读文件系统会导致本地 sqlite 写入失败，默认改用 /tmp。
def _default_database_url() -> str:
    if os.getenv("VERCEL") == "1" or os.getenv("VERCEL_ENV"):
        return "sqlite:////tmp/gsc.db"
    return "sqlite:///./gsc.db"


def resolve_database_url() -> str:
    """
    按环境选择数据库 URL。
    生产环境优先级：POSTGRESQL_ADDON_URI > DATABASE_URL_PRODUCTION > DATABASE_URL
    """
    if is_production():
        candidates = ("POSTGRESQL_ADDON_URI", "DATABASE_URL_PRODUCTION", "DATABASE_URL")
    else:
        candidates = ("DATABASE_URL",)

    url = ""
    for key in candidates:
        url = (os.getenv(key) or "").strip()
        if url:
            break

    if not url:
        logger.warning("DATABASE_URL is not set, falling back to local sqlite")
        return _default_database_url()

    # SQLAlchemy 不认 postgres:// 前缀（Clever Cloud / Heroku 风格）
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def get_engine() -> Engine:
    """首次调用时创建引擎，之后复用同一个连接池"""
    global _engine
    if _engine is None:
        url = resolve_database_url()
        # SQLite 需要 check_same_thread=False，PostgreSQL/MySQL 不需要
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}
        _engine = create_engine(
            url,
            connect_args=connect_args,
            pool_pre_ping=True,  # 连接前检查连接是否有效
        )
        SessionLocal.configure(bind=_engine)
    return _engine


def dispose_engine() -> None:
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None


def init_db() -> None:
    """创建数据库表（可重复调用）"""
    from . import models  # noqa: F401  注册所有表

    Base.metadata.create_all(bind=get_engine())


@contextmanager
def transactional(db: Session):
    """单个事务：成功提交，异常回滚后继续抛出"""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def get_db():
    """数据库会话依赖注入"""
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
