"""
认证模块：密码哈希、Session Token 管理
"""
import base64
import hashlib
import hmac
import logging
import os
from typing import Optional

from fastapi import HTTPException, Request
from itsdangerous import BadSignature, URLSafeTimedSerializer

logger = logging.getLogger(__name__)

SESSION_COOKIE = "gsc_admin_session"

# 生产环境请用环境变量
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@gsccapitalgroup.com")


# ===== PBKDF2 password hashing (no bcrypt dependency) =====
# 格式: pbkdf2_sha256$iterations$salt$hash
def hash_password(password: str, iterations: int = 260_000) -> str:
    """生成 PBKDF2 密码哈希"""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return "pbkdf2_sha256${}${}${}".format(
        iterations,
        base64.urlsafe_b64encode(salt).decode("utf-8").rstrip("="),
        base64.urlsafe_b64encode(dk).decode("utf-8").rstrip("="),
    )


def _decode_b64(s: str) -> bytes:
    # 补全到 4 的倍数
    missing_padding = len(s) % 4
    if missing_padding:
        s += "=" * (4 - missing_padding)
    return base64.urlsafe_b64decode(s)


def verify_password(password: str, stored: str) -> bool:
    """验证密码（支持 PBKDF2 哈希或明文比对）"""
    if not stored:
        return False

    if stored.startswith("pbkdf2_sha256$"):
        parts = stored.split("$")
        if len(parts) != 4:
            return False
        _, iters, salt_b64, dk_b64 = parts
        try:
            iterations = int(iters)
            salt = _decode_b64(salt_b64)
            dk_expected = _decode_b64(dk_b64)
        except ValueError as e:
            logger.warning(f"Malformed password hash: {e}")
            return False
        dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
        return hmac.compare_digest(dk, dk_expected)

    # 兼容明文（仅开发环境）
    return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))


# 初始密码：admin123（生产环境请配置 ADMIN_PASS_HASH）
# 生成哈希：python -c "from gsc_site.auth import hash_password; print(hash_password('your_password'))"
ADMIN_PASS_HASH = os.getenv("ADMIN_PASS_HASH", "admin123")

# Session 密钥（生产环境必须修改）
SECRET = os.getenv("SECRET_KEY", "CHANGE_ME_TO_A_RANDOM_SECRET_IN_PRODUCTION")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(7 * 24 * 3600)))
serializer = URLSafeTimedSerializer(SECRET, salt="gsc-admin")


def check_credentials(email: str, password: str) -> bool:
    if (email or "").strip().lower() != ADMIN_EMAIL.lower():
        return False
    return verify_password(password, ADMIN_PASS_HASH)


def create_session_token(email: str) -> str:
    """创建 session token"""
    return serializer.dumps({"u": email.strip().lower()})


def read_session_token(token: str) -> dict:
    """读取并验证 session token（过期同样视为无效）"""
    return serializer.loads(token, max_age=SESSION_MAX_AGE)


def _request_token(request: Request) -> Optional[str]:
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        return token
    header = request.headers.get("authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def is_logged_in(request: Request) -> bool:
    """检查用户是否已登录"""
    token = _request_token(request)
    if not token:
        return False
    try:
        data = read_session_token(token)
    except BadSignature:
        return False
    return isinstance(data, dict) and data.get("u") == ADMIN_EMAIL.lower()


def require_admin(request: Request) -> None:
    """后台接口依赖：未登录直接 401"""
    if not is_logged_in(request):
        raise HTTPException(status_code=401, detail="Unauthorized")
