# drainwise/tests/test_standard_categories_api.py

import unittest

import pytest

from drainwise.config import TestingConfig
from drainwise.extensions import db
from drainwise.server import create_app
from drainwise.services.standard_category_service import derive_category_id


class TestDeriveCategoryId:

    @pytest.mark.parametrize("name, expected", [
        ("CCTV", "cctv"),
        ("CCTV/Jet Vac", "cctv-jet-vac"),
        ("Patch  Repairs", "patch-repairs"),
        ("Lining (CIPP)", "lining-cipp-"),
    ])
    def test_derivation(self, name, expected):
        assert derive_category_id(name) == expected


class StandardCategoryApiTestCase(unittest.TestCase):

    def setUp(self):
        self.app = create_app(TestingConfig)
        self.client = self.app.test_client()

    def tearDown(self):
        self.app.extensions["autosave"].shutdown()
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    def test_second_create_with_same_name_conflicts(self):
        first = self.client.post("/api/standard-categories", json={"categoryName": "Root Cutting"})
        self.assertEqual(first.status_code, 200)
        body = first.get_json()
        self.assertEqual(body["categoryId"], "root-cutting")
        self.assertEqual(body["iconName"], "Edit")
        self.assertTrue(body["isDefault"])
        self.assertTrue(body["isActive"])

        second = self.client.post("/api/standard-categories", json={"categoryName": "Root Cutting"})
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.get_json(), {"error": "Category already exists"})

    def test_names_deriving_the_same_id_conflict(self):
        self.client.post("/api/standard-categories", json={"categoryName": "Jet Vac"})
        resp = self.client.post("/api/standard-categories", json={"categoryName": "jet/vac"})
        self.assertEqual(resp.status_code, 409)

    def test_category_name_is_required(self):
        for body in ({}, {"categoryName": "   "}, {"categoryName": 12}):
            resp = self.client.post("/api/standard-categories", json=body)
            self.assertEqual(resp.status_code, 400, msg=body)
            self.assertEqual(resp.get_json()["error"], "Category name is required")

    def test_description_generated_from_name(self):
        resp = self.client.post("/api/standard-categories", json={"categoryName": "Drain Patching"})
        self.assertEqual(
            resp.get_json()["description"],
            "Localized pipe repair and patching services according to WRc Drain Repair Book standards",
        )

        resp = self.client.post("/api/standard-categories", json={"categoryName": "Root Removal"})
        self.assertEqual(
            resp.get_json()["description"],
            "Root Removal services compliant with WRc Group standards and industry best practices",
        )

    def test_supplied_description_is_kept(self):
        resp = self.client.post(
            "/api/standard-categories", json={"categoryName": "CCTV", "description": "Survey work"}
        )
        self.assertEqual(resp.get_json()["description"], "Survey work")

    def test_list_returns_created_categories(self):
        self.client.post("/api/standard-categories", json={"categoryName": "CCTV"})
        self.client.post("/api/standard-categories", json={"categoryName": "Jetting"})

        resp = self.client.get("/api/standard-categories")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([item["categoryId"] for item in resp.get_json()], ["cctv", "jetting"])


if __name__ == "__main__":
    unittest.main()
