"""
后台管理视图：登录、登出、后台首页
"""
import os
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from .auth import (
    ADMIN_EMAIL,
    SESSION_COOKIE,
    SESSION_MAX_AGE,
    check_credentials,
    create_session_token,
    is_logged_in,
    require_admin,
)
from .crud import count_content, list_companies, list_messages
from .db import get_db
from .media import optimize_preview_image
from .schemas import DashboardCounts, LoginRequest

router = APIRouter()

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
templates.env.filters["preview"] = optimize_preview_image

LATEST_MESSAGES = 5


def _cookie_secure() -> bool:
    return os.getenv("SESSION_COOKIE_SECURE", "").strip().lower() in {"1", "true", "yes", "on"}


def _set_session_cookie(resp, token: str) -> None:
    resp.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=_cookie_secure(),  # 生产环境 HTTPS 时设为 True
    )


@router.get("/admin/login", response_class=HTMLResponse)
def admin_login_page(request: Request):
    """登录页面"""
    if is_logged_in(request):
        return RedirectResponse(url="/admin", status_code=302)
    return templates.TemplateResponse(request, "login.html", {"error": ""})


@router.post("/admin/login")
def admin_login(request: Request, email: str = Form(...), password: str = Form(...)):
    """处理登录请求"""
    if check_credentials(email, password):
        resp = RedirectResponse(url="/admin", status_code=302)
        _set_session_cookie(resp, create_session_token(email))
        return resp
    return templates.TemplateResponse(
        request,
        "login.html",
        {"error": "Invalid email or password."},
        status_code=401,
    )


@router.get("/admin/logout")
def admin_logout():
    """登出"""
    resp = RedirectResponse(url="/admin/login", status_code=302)
    resp.delete_cookie(SESSION_COOKIE)
    return resp


@router.get("/admin", response_class=HTMLResponse)
def admin_home(request: Request, db: Session = Depends(get_db)):
    """后台首页（需要登录）"""
    if not is_logged_in(request):
        return RedirectResponse(url="/admin/login", status_code=302)

    return templates.TemplateResponse(request, "admin_home.html", {
        "admin_email": ADMIN_EMAIL,
        "counts": count_content(db),
        "companies": list_companies(db, include_inactive=True),
        "messages": list_messages(db, limit=LATEST_MESSAGES),
    })


# ===== JSON 接口（后台前端使用） =====

@router.post("/api/admin/login")
def api_login(payload: LoginRequest):
    if not check_credentials(payload.email, payload.password):
        return JSONResponse(status_code=401, content={"error": "Invalid credentials"})
    token = create_session_token(payload.email)
    resp = JSONResponse({"ok": True, "token": token})
    _set_session_cookie(resp, token)
    return resp


@router.post("/api/admin/logout")
def api_logout():
    resp = JSONResponse({"ok": True})
    resp.delete_cookie(SESSION_COOKIE)
    return resp


@router.get("/api/admin/session")
def api_session(request: Request):
    return {"authenticated": is_logged_in(request)}


@router.get("/api/admin/dashboard", response_model=DashboardCounts, dependencies=[Depends(require_admin)])
def api_dashboard(db: Session = Depends(get_db)):
    return count_content(db)
