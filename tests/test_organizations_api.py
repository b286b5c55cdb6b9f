import os
import unittest
import uuid
from datetime import datetime, timezone
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, delete
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure settings can be initialized in test environments
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")

from app.main import app
from app.db.session import get_db
from app.models.organization import Organization

URL = "/api/v1/organizations"


class OrganizationsApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autocommit=False, autoflush=False)
        Organization.__table__.create(bind=cls.engine)

    @classmethod
    def tearDownClass(cls):
        Organization.__table__.drop(bind=cls.engine)
        cls.engine.dispose()

    def setUp(self):
        with self.SessionLocal() as db:
            db.execute(delete(Organization))
            db.add_all(
                [
                    Organization(
                        id=uuid.UUID(int=1),
                        name="CLEAR",
                        creation_date=datetime(2002, 9, 22, tzinfo=timezone.utc),
                        employee_count=10000,
                        is_public=True,
                    ),
                    Organization(
                        id=uuid.UUID(int=2),
                        name="CLEAR",
                        creation_date=datetime(2012, 3, 4, tzinfo=timezone.utc),
                        employee_count=12,
                        is_public=False,
                    ),
                    Organization(
                        id=uuid.UUID(int=3),
                        name="Acme",
                        creation_date=datetime(1999, 1, 1, tzinfo=timezone.utc),
                        employee_count=3,
                        is_public=False,
                    ),
                ]
            )
            db.commit()

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        self.client.close()
        app.dependency_overrides.clear()

    def test_search_by_exact_name(self):
        response = self.client.get(URL, params={"filter": "name:CLEAR"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([o["id"] for o in body["organizations"]], [str(uuid.UUID(int=1)), str(uuid.UUID(int=2))])
        self.assertEqual(body["page"], 1)
        self.assertEqual(body["page_size"], 20)
        self.assertEqual(body["total_count"], 2)
        self.assertEqual(body["total_pages"], 1)

    def test_search_with_range_and_page(self):
        response = self.client.get(
            URL,
            params=[
                ("filter", "name:CLEAR"),
                ("range_filter", "creation_date:[2002-09-22T00:00:00ZTO*]"),
                ("page", "2"),
                ("page_size", "1"),
            ],
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body["organizations"]), 1)
        self.assertEqual(body["organizations"][0]["employee_count"], 12)
        self.assertEqual((body["page"], body["total_count"], body["total_pages"]), (2, 2, 2))

    def test_no_match_is_not_found(self):
        response = self.client.get(URL, params={"filter": "name:Nobody"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "No organizations found")

    def test_invalid_page_is_bad_request(self):
        response = self.client.get(URL, params={"filter": "name:CLEAR", "page": "r"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "invalid page query parameter 'r'")

    def test_page_beyond_store_range_is_bad_request(self):
        response = self.client.get(URL, params={"page": "99999999999999999999"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "invalid page query parameter '99999999999999999999'")

    def test_timestamp_with_offset_matches_utc_row(self):
        bound = "2002-09-22T02:00:00+02:00"
        response = self.client.get(URL, params={"range_filter": f"creation_date:[{bound} TO {bound}]"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([o["id"] for o in response.json()["organizations"]], [str(uuid.UUID(int=1))])

    def test_filter_errors_are_bad_request(self):
        cases = [
            ({"filter": "name=CLEAR"}, "invalid filter 'name=CLEAR'"),
            ({"filter": "revenue:10"}, "invalid column name 'revenue'"),
            ({"range_filter": "name:[A TO B]"}, "cannot supply range filter for categorical column 'name'"),
            ({"range_filter": "employee_count:[x TO 5]"}, "invalid number value 'x' for column 'employee_count'"),
        ]
        for params, detail in cases:
            with self.subTest(params=params):
                response = self.client.get(URL, params=params)
                self.assertEqual(response.status_code, 400)
                self.assertTrue(response.json()["detail"].startswith(detail))

    def test_store_failure_is_internal_error(self):
        with patch("sqlalchemy.orm.Query.count", side_effect=OperationalError("SELECT", {}, Exception("down"))):
            response = self.client.get(URL)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], "search query failed")

    def test_response_carries_request_id(self):
        response = self.client.get("/health", headers={"X-Request-ID": "abc-123"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["X-Request-ID"], "abc-123")

    def test_malformed_request_id_is_replaced(self):
        response = self.client.get("/health", headers={"X-Request-ID": "bad id!"})
        generated = response.headers["X-Request-ID"]
        self.assertNotEqual(generated, "bad id!")
        self.assertEqual(len(generated), 32)

    def test_search_access_line_includes_filters(self):
        with self.assertLogs("app.http", level="INFO") as logs:
            self.client.get(URL, params={"filter": "name:CLEAR"})
        self.assertTrue(any("?filter=" in line and "-> 200" in line for line in logs.output))

    def test_create_assigns_id(self):
        payload = {
            "name": "Organization 1",
            "creation_date": "2021-09-26T00:00:00Z",
            "employee_count": 10,
            "is_public": False,
        }
        response = self.client.post(URL, json=payload)
        self.assertEqual(response.status_code, 201)
        created_id = uuid.UUID(response.json()["id"])
        with self.SessionLocal() as db:
            created = db.get(Organization, created_id)
            self.assertIsNotNone(created)
            self.assertEqual(created.name, "Organization 1")
            self.assertEqual(created.employee_count, 10)

    def test_create_rejects_client_id(self):
        payload = {
            "id": "1eacb0fa-d4ae-4d5e-9b69-268c1359db19",
            "name": "Organization 1",
            "creation_date": "2021-09-26T00:00:00Z",
        }
        response = self.client.post(URL, json=payload)
        self.assertEqual(response.status_code, 400)
        self.assertIn("invalid request body", response.json()["detail"])
        self.assertIn("id", response.json()["detail"])

    def test_create_rejects_malformed_body(self):
        response = self.client.post(
            URL,
            content=b'{"invalid":"invalid",creation_date": "2021-09-26T00:00:00Z"}',
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "invalid request body")


if __name__ == "__main__":
    unittest.main()
