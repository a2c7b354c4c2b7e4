from gsc_site.models import Company, CompanyFeature, User
from gsc_site.seed import COMPANIES, seed

from .support import ApiTestCase


class SeedTest(ApiTestCase):

    def test_seed_is_idempotent(self):
        with self.Session() as db:
            first = seed(db)
            second = seed(db)

        self.assertEqual(first, {"companies": 5, "statistics": 4, "testimonials": 3, "services": 4, "users": 1})
        self.assertEqual(second, {"companies": 0, "statistics": 0, "testimonials": 0, "services": 0, "users": 0})

        with self.Session() as db:
            self.assertEqual(db.query(Company).count(), len(COMPANIES))
            self.assertEqual(db.query(CompanyFeature).count(), 20)
            self.assertEqual(db.query(User).count(), 1)

    def test_seeded_content_is_public(self):
        with self.Session() as db:
            seed(db)
        slugs = [c["slug"] for c in self.anon.get("/api/companies").json()]
        self.assertEqual(slugs, ["roomy-finder", "it-solutions", "real-estate", "consulting", "investment"])
        values = [s["value"] for s in self.anon.get("/api/statistics").json()]
        self.assertEqual(values, ["10,000+", "500+", "1,000+", "$500M+"])
