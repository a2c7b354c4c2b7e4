import os
import unittest
from unittest.mock import patch

from gsc_site import db


class DatabaseUrlTest(unittest.TestCase):

    def resolve(self, env):
        with patch.dict(os.environ, env, clear=True):
            return db.resolve_database_url()

    def test_development_uses_database_url(self):
        url = self.resolve({
            "DATABASE_URL": "postgresql://dev/db",
            "POSTGRESQL_ADDON_URI": "postgresql://addon/db",
        })
        self.assertEqual(url, "postgresql://dev/db")

    def test_production_precedence(self):
        env = {
            "APP_ENV": "production",
            "POSTGRESQL_ADDON_URI": "postgresql://addon/db",
            "DATABASE_URL_PRODUCTION": "postgresql://prod/db",
            "DATABASE_URL": "postgresql://default/db",
        }
        self.assertEqual(self.resolve(env), "postgresql://addon/db")

        env.pop("POSTGRESQL_ADDON_URI")
        self.assertEqual(self.resolve(env), "postgresql://prod/db")

        env.pop("DATABASE_URL_PRODUCTION")
        self.assertEqual(self.resolve(env), "postgresql://default/db")

    def test_node_env_production(self):
        url = self.resolve({"NODE_ENV": "production", "DATABASE_URL_PRODUCTION": "postgresql://prod/db"})
        self.assertEqual(url, "postgresql://prod/db")

    def test_postgres_scheme_normalised(self):
        self.assertEqual(self.resolve({"DATABASE_URL": "postgres://u:p@h/db"}), "postgresql://u:p@h/db")

    def test_sqlite_fallback(self):
        self.assertEqual(self.resolve({}), "sqlite:///./gsc.db")
        self.assertEqual(self.resolve({"VERCEL": "1"}), "sqlite:////tmp/gsc.db")


class EngineLifecycleTest(unittest.TestCase):

    def test_engine_is_created_once_and_disposed(self):
        db.dispose_engine()
        with patch.dict(os.environ, {"DATABASE_URL": "sqlite://"}, clear=True):
            first = db.get_engine()
            self.assertIs(db.get_engine(), first)
            db.init_db()
        db.dispose_engine()
        self.assertIsNone(db._engine)
