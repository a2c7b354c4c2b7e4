"""
测试公共设施：内存 SQLite + 覆盖 get_db 依赖 + 已登录的后台客户端
"""
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gsc_site import auth
from gsc_site.db import Base, get_db
from gsc_site.main import app
from gsc_site import models  # noqa: F401

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "s3cret-pass"


class ApiTestCase(unittest.TestCase):
    """每个用例一份全新的内存数据库"""

    def setUp(self):
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(bind=self.engine)
        self.Session = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db

        patchers = [
            patch.object(auth, "ADMIN_EMAIL", ADMIN_EMAIL),
            patch.object(auth, "ADMIN_PASS_HASH", auth.hash_password(ADMIN_PASSWORD, iterations=1000)),
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

        self.anon = TestClient(app)
        self.client = TestClient(app)
        resp = self.client.post(
            "/api/admin/login",
            json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
        )
        self.assertEqual(resp.status_code, 200, resp.text)

    def tearDown(self):
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=self.engine)
        self.engine.dispose()

    # ===== helpers =====

    def create_company(self, **overrides):
        payload = {"name": "Acme", "slug": "acme", "description": "d"}
        payload.update(overrides)
        resp = self.client.post("/api/companies", json=payload)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def create(self, path: str, payload: dict) -> dict:
        resp = self.client.post(path, json=payload)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()
