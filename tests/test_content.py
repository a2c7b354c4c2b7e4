from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from .support import ApiTestCase


class StatisticApiTest(ApiTestCase):

    def test_crud_cycle(self):
        created = self.create("/api/statistics", {"label": "Portfolio", "value": "$500M+", "icon": "TrendingUp"})
        self.assertEqual(created["value"], "$500M+")
        self.assertEqual(created["order"], 0)
        self.assertTrue(created["isActive"])

        resp = self.client.put(f"/api/statistics/{created['id']}", json={
            "label": "Portfolio",
            "value": "$750M+",
            "imageUrl": "https://example.com/a.png",
            "order": 2,
        })
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["value"], "$750M+")
        self.assertEqual(resp.json()["imageUrl"], "https://example.com/a.png")

        self.assertEqual(self.anon.get(f"/api/statistics/{created['id']}").json()["order"], 2)
        self.assertEqual(self.client.delete(f"/api/statistics/{created['id']}").status_code, 200)
        self.assertEqual(self.anon.get(f"/api/statistics/{created['id']}").status_code, 404)
        self.assertEqual(self.client.delete(f"/api/statistics/{created['id']}").status_code, 404)

    def test_list_is_ordered_and_hides_inactive(self):
        self.create("/api/statistics", {"label": "C", "value": "3", "order": 3})
        self.create("/api/statistics", {"label": "A", "value": "1", "order": 1})
        self.create("/api/statistics", {"label": "Hidden", "value": "0", "order": 0, "isActive": False})

        labels = [s["label"] for s in self.anon.get("/api/statistics").json()]
        self.assertEqual(labels, ["A", "C"])

        labels = [s["label"] for s in self.client.get("/api/statistics?include_inactive=true").json()]
        self.assertEqual(labels, ["Hidden", "A", "C"])

    def test_list_failure_surfaces_500(self):
        with patch("gsc_site.crud.list_statistics", side_effect=SQLAlchemyError("db down")):
            resp = self.anon.get("/api/statistics")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Failed to fetch statistics"})


class TestimonialApiTest(ApiTestCase):

    def test_rating_defaults_to_five(self):
        created = self.create("/api/testimonials", {"name": "Sarah", "content": "Great"})
        self.assertEqual(created["rating"], 5)
        self.assertIsNone(created["company"])

    def test_rating_out_of_range_rejected(self):
        for rating in (0, 6):
            resp = self.client.post("/api/testimonials", json={"name": "S", "content": "c", "rating": rating})
            self.assertEqual(resp.status_code, 400)

    def test_update_and_delete(self):
        created = self.create("/api/testimonials", {
            "name": "Michael", "company": "Global", "role": "MD", "content": "Good", "rating": 4,
        })
        resp = self.client.put(f"/api/testimonials/{created['id']}", json={
            "name": "Michael", "content": "Very good", "rating": 5, "isActive": False,
        })
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["isActive"])
        self.assertEqual(self.anon.get("/api/testimonials").json(), [])

        self.assertEqual(self.client.delete(f"/api/testimonials/{created['id']}").status_code, 200)

    def test_list_failure_is_not_swallowed(self):
        with patch("gsc_site.crud.list_testimonials", side_effect=SQLAlchemyError("db down")):
            resp = self.anon.get("/api/testimonials")
        self.assertEqual(resp.status_code, 500)

    def test_create_requires_login(self):
        resp = self.anon.post("/api/testimonials", json={"name": "S", "content": "c"})
        self.assertEqual(resp.status_code, 401)


class ServiceApiTest(ApiTestCase):

    def test_crud_cycle(self):
        created = self.create("/api/services", {
            "title": "Cybersecurity", "description": "Protect", "category": "tech", "icon": "Shield",
        })
        self.assertEqual(created["category"], "tech")

        resp = self.client.put(f"/api/services/{created['id']}", json={
            "title": "Cybersecurity", "description": "Protect more", "category": "consulting",
        })
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["category"], "consulting")
        self.assertEqual(self.anon.get(f"/api/services/{created['id']}").json()["description"], "Protect more")

        self.assertEqual(self.client.delete(f"/api/services/{created['id']}").status_code, 200)
        self.assertEqual(self.client.put(f"/api/services/{created['id']}", json={
            "title": "x", "description": "y",
        }).status_code, 404)

    def test_category_must_be_known(self):
        resp = self.client.post("/api/services", json={"title": "T", "description": "D", "category": "retail"})
        self.assertEqual(resp.status_code, 400)

    def test_category_defaults_to_property(self):
        created = self.create("/api/services", {"title": "T", "description": "D"})
        self.assertEqual(created["category"], "property")

    def test_list_order(self):
        self.create("/api/services", {"title": "B", "description": "d", "order": 1})
        self.create("/api/services", {"title": "A", "description": "d", "order": 0})
        self.create("/api/services", {"title": "Off", "description": "d", "isActive": False})
        titles = [s["title"] for s in self.anon.get("/api/services").json()]
        self.assertEqual(titles, ["A", "B"])


class SectionApiTest(ApiTestCase):

    def test_create_and_list(self):
        self.create("/api/sections", {"title": "About", "subtitle": "Who we are", "type": "about", "order": 1})
        self.create("/api/sections", {"title": "Hero", "content": "Welcome", "type": "hero"})
        self.create("/api/sections", {"title": "Draft", "isActive": False})

        sections = self.anon.get("/api/sections").json()
        self.assertEqual([s["title"] for s in sections], ["Hero", "About"])
        self.assertEqual(sections[1]["subtitle"], "Who we are")

    def test_update_and_delete(self):
        created = self.create("/api/sections", {"title": "Hero"})
        self.assertEqual(created["type"], "content")

        resp = self.client.put(f"/api/sections/{created['id']}", json={"title": "Hero 2", "type": "hero"})
        self.assertEqual(resp.json()["title"], "Hero 2")
        self.assertEqual(self.client.delete(f"/api/sections/{created['id']}").json(), {
            "message": "Section deleted successfully",
        })
        self.assertEqual(self.anon.get(f"/api/sections/{created['id']}").status_code, 404)
