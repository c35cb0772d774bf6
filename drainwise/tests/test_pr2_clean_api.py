# drainwise/tests/test_pr2_clean_api.py

import json
import unittest
from unittest.mock import patch

from drainwise.config import TestingConfig
from drainwise.extensions import db
from drainwise.models.pr2_configuration import PR2Configuration
from drainwise.server import create_app


def owner_header(owner_id: str):
    return {"X-Owner-Id": owner_id}


class PR2CleanApiTestCase(unittest.TestCase):
    """
    CRUD flows for /api/pr2-clean against an in-memory database.
    """

    def setUp(self):
        self.app = create_app(TestingConfig)
        self.client = self.app.test_client()

    def tearDown(self):
        self.app.extensions["autosave"].shutdown()
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _create(self, payload=None, owner="test-user"):
        resp = self.client.post("/api/pr2-clean", json=payload or {}, headers=owner_header(owner))
        self.assertEqual(resp.status_code, 200, msg=resp.get_json())
        return resp.get_json()

    def _count(self):
        with self.app.app_context():
            return PR2Configuration.query.count()

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------
    def test_create_with_empty_body_applies_defaults(self):
        body = self._create({})

        self.assertEqual(body["mathOperators"], ["N/A"])
        for field in ("pricingOptions", "quantityOptions", "minQuantityOptions", "additionalOptions"):
            self.assertEqual(body[field], {})
        self.assertEqual(body["categoryColor"], "#ffffff")
        self.assertEqual(body["pipeSize"], "150")
        self.assertEqual(body["sector"], "utilities")
        self.assertEqual(body["rangeValues"], {})
        self.assertEqual(body["vehicleTravelRates"], [])
        self.assertEqual(body["categoryName"], "New Clean Configuration")
        self.assertTrue(body["categoryId"].startswith("clean-"))
        self.assertTrue(body["isActive"])
        self.assertEqual(body["description"], "New Clean Configuration price configuration")
        self.assertEqual(
            body["stackOrder"],
            {"pricing": [], "quantity": [], "minQuantity": [], "additional": []},
        )

    def test_create_cctv_configuration(self):
        body = self._create({"categoryName": "CCTV", "sector": "utilities"})

        self.assertEqual(body["pipeSize"], "150")
        self.assertEqual(body["categoryColor"], "#ffffff")
        self.assertTrue(body["isActive"])
        self.assertIsInstance(body["id"], int)
        self.assertEqual(body["ownerId"], "test-user")

    def test_create_without_owner_header_uses_placeholder_identity(self):
        resp = self.client.post("/api/pr2-clean", json={"categoryName": "CCTV"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["ownerId"], "test-user")

    def test_create_ignores_echoed_read_only_fields(self):
        body = self._create({"id": 999, "createdAt": "yesterday", "categoryName": "CCTV"})
        self.assertNotEqual(body["id"], 999)

    def test_create_rejects_malformed_option_entry(self):
        resp = self.client.post(
            "/api/pr2-clean",
            json={"pricingOptions": {"dayRate": {"enabled": "maybe", "value": ""}}},
        )
        self.assertEqual(resp.status_code, 400)
        body = resp.get_json()
        self.assertEqual(body["error"], "Validation failed")
        self.assertIn("pricingOptions", body["details"])
        self.assertEqual(self._count(), 0)

    def test_create_rejects_unknown_sector_and_bad_colour(self):
        resp = self.client.post("/api/pr2-clean", json={"sector": "space", "categoryColor": "blue"})
        self.assertEqual(resp.status_code, 400)
        details = resp.get_json()["details"]
        self.assertIn("sector", details)
        self.assertIn("categoryColor", details)

    def test_create_rejects_unknown_math_operator(self):
        resp = self.client.post("/api/pr2-clean", json={"mathOperators": ["%"]})
        self.assertEqual(resp.status_code, 400)

    def test_create_stores_numeric_values_as_strings(self):
        body = self._create({"pricingOptions": {"dayRate": {"enabled": True, "value": 1850}}, "pipeSize": 225})
        self.assertEqual(body["pricingOptions"]["dayRate"], {"enabled": True, "value": "1850"})
        self.assertEqual(body["pipeSize"], "225")

    def test_create_duplicate_tuple_conflicts(self):
        payload = {"categoryId": "cctv", "sector": "utilities", "pipeSize": "150"}
        self._create(payload)
        resp = self.client.post("/api/pr2-clean", json=payload)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self._count(), 1)

    def test_generated_category_ids_do_not_collide_within_a_millisecond(self):
        with patch("drainwise.services.pr2_configuration_service.time") as mock_time:
            mock_time.time.return_value = 1700000000.123
            first = self._create({})
            second = self._create({})

        generated = f"clean-{int(1700000000.123 * 1000)}"
        self.assertEqual(first["categoryId"], generated)
        self.assertEqual(second["categoryId"], f"{generated}-2")
        self.assertEqual(self._count(), 2)

    def test_create_rejects_malformed_range_values(self):
        for range_values in (
            {"abc": [{"id": 1}]},
            {"150": 5},
            {"150": "junk"},
            {"150": [{"blueValue": "10"}]},
            {"150": [{"id": 1, "colour": "red"}]},
            {"150": [{"id": 1}, {"id": 1}]},
        ):
            resp = self.client.post("/api/pr2-clean", json={"rangeValues": range_values})
            self.assertEqual(resp.status_code, 400, msg=range_values)
            self.assertIn("rangeValues", resp.get_json()["details"])
        self.assertEqual(self._count(), 0)

    def test_create_normalises_range_rows(self):
        body = self._create({"rangeValues": {"150-1501": [{"id": 1, "purpleLength": 30}]}})
        self.assertEqual(
            body["rangeValues"],
            {"150-1501": [{"id": 1, "blueValue": "", "greenValue": "", "purpleDebris": "", "purpleLength": "30"}]},
        )

    def test_create_generates_description_from_enabled_options(self):
        body = self._create({
            "categoryName": "CCTV",
            "pricingOptions": {
                "dayRate": {"enabled": True, "value": "1850"},
                "hourlyRate": {"enabled": False, "value": "90"},
            },
            "mathOperators": ["÷"],
            "quantityOptions": {"runsPerShift": {"enabled": True, "value": "20"}},
        })
        self.assertEqual(body["description"], "Day Rate = £1850. ÷. Runs per Shift = 20")

    def test_create_keeps_supplied_description(self):
        body = self._create({"description": "Night work only"})
        self.assertEqual(body["description"], "Night work only")

    def test_option_order_is_preserved(self):
        body = self._create({
            "pricingOptions": {
                "zetaRate": {"enabled": False, "value": ""},
                "alphaRate": {"enabled": False, "value": ""},
            }
        })
        self.assertEqual(list(body["pricingOptions"]), ["zetaRate", "alphaRate"])

    def test_create_repairs_stale_stack_order(self):
        body = self._create({
            "pricingOptions": {
                "dayRate": {"enabled": True, "value": "1"},
                "hourlyRate": {"enabled": True, "value": "2"},
            },
            "stackOrder": {"pricing": ["ghost", "hourlyRate"]},
            "vehicleTravelRates": [{"id": 7, "vehicleType": "3.5t Van", "hourlyRate": 55}],
            "vehicleTravelRatesStackOrder": ["9", "7"],
        })
        self.assertEqual(body["stackOrder"]["pricing"], ["hourlyRate", "dayRate"])
        self.assertEqual(body["stackOrder"]["quantity"], [])
        self.assertEqual(body["vehicleTravelRatesStackOrder"], ["7"])
        self.assertEqual(body["vehicleTravelRates"][0]["id"], "7")
        self.assertEqual(body["vehicleTravelRates"][0]["numberOfHours"], "")

    # ------------------------------------------------------------------
    # list / get
    # ------------------------------------------------------------------
    def test_list_is_owner_scoped_for_every_filter_combination(self):
        self._create({"categoryId": "cctv", "sector": "utilities"}, owner="owner-a")
        self._create({"categoryId": "cctv", "sector": "highways"}, owner="owner-a")
        self._create({"categoryId": "jetting", "sector": "utilities"}, owner="owner-a")
        self._create({"categoryId": "cctv", "sector": "utilities"}, owner="owner-b")
        self._create({"categoryId": "jetting", "sector": "highways"}, owner="owner-b")

        queries = {
            "": 3,
            "?sector=utilities": 2,
            "?categoryId=cctv": 2,
            "?sector=utilities&categoryId=cctv": 1,
            "?sector=highways&categoryId=jetting": 0,
        }
        for query, expected in queries.items():
            resp = self.client.get(f"/api/pr2-clean{query}", headers=owner_header("owner-a"))
            self.assertEqual(resp.status_code, 200)
            body = resp.get_json()
            self.assertEqual(len(body), expected, msg=query)
            self.assertTrue(all(item["ownerId"] == "owner-a" for item in body), msg=query)

    def test_list_by_category_is_newest_first_with_pipe_size_filter(self):
        first = self._create({"categoryId": "cctv", "pipeSize": "150"})
        second = self._create({"categoryId": "cctv", "pipeSize": "225"})
        self._create({"categoryId": "jetting", "pipeSize": "150"})

        resp = self.client.get("/api/pr2-clean/category/cctv")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([item["id"] for item in resp.get_json()], [second["id"], first["id"]])

        resp = self.client.get("/api/pr2-clean/category/cctv?pipeSize=150")
        self.assertEqual([item["id"] for item in resp.get_json()], [first["id"]])

    def test_get_by_id(self):
        created = self._create({"categoryName": "CCTV"})
        resp = self.client.get(f"/api/pr2-clean/{created['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["categoryName"], "CCTV")

    def test_get_missing_or_foreign_record_is_not_found(self):
        created = self._create({"categoryName": "CCTV"}, owner="owner-a")

        resp = self.client.get("/api/pr2-clean/4242", headers=owner_header("owner-a"))
        self.assertEqual(resp.status_code, 404)

        resp = self.client.get(f"/api/pr2-clean/{created['id']}", headers=owner_header("owner-b"))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["error"], "Configuration not found")

    # ------------------------------------------------------------------
    # update
    # ------------------------------------------------------------------
    def test_update_replaces_omitted_fields_with_defaults(self):
        created = self._create({
            "categoryId": "cctv",
            "categoryName": "CCTV",
            "categoryColor": "#123456",
            "pricingOptions": {"dayRate": {"enabled": True, "value": "1850"}},
            "mathOperators": ["+"],
            "rangeValues": {"150": [{"id": 1}]},
        })

        resp = self.client.put(f"/api/pr2-clean/{created['id']}", json={"categoryName": "CCTV renamed"})
        self.assertEqual(resp.status_code, 200)
        body = resp.get_json()

        self.assertEqual(body["categoryName"], "CCTV renamed")
        self.assertEqual(body["categoryId"], "cctv")
        self.assertEqual(body["pricingOptions"], {})
        self.assertEqual(body["mathOperators"], ["N/A"])
        self.assertEqual(body["rangeValues"], {})
        self.assertEqual(body["categoryColor"], "#ffffff")
        self.assertTrue(body["updatedAt"])

    def test_update_is_idempotent(self):
        created = self._create({"categoryId": "cctv"})
        payload = {
            "categoryName": "CCTV",
            "pricingOptions": {
                "dayRate": {"enabled": True, "value": "1850"},
                "setupRate": {"enabled": False, "value": ""},
            },
            "stackOrder": {"pricing": ["setupRate", "dayRate"]},
            "mathOperators": ["×"],
        }

        first = self.client.put(f"/api/pr2-clean/{created['id']}", json=payload).get_json()
        second = self.client.put(f"/api/pr2-clean/{created['id']}", json=payload).get_json()

        first.pop("updatedAt")
        second.pop("updatedAt")
        self.assertEqual(first, second)

    def test_update_missing_record(self):
        resp = self.client.put("/api/pr2-clean/4242", json={"categoryName": "CCTV"})
        self.assertEqual(resp.status_code, 404)

    def test_update_into_existing_tuple_conflicts(self):
        self._create({"categoryId": "cctv", "pipeSize": "150"})
        other = self._create({"categoryId": "cctv", "pipeSize": "225"})

        resp = self.client.put(f"/api/pr2-clean/{other['id']}", json={"pipeSize": "150"})
        self.assertEqual(resp.status_code, 409)

        resp = self.client.get(f"/api/pr2-clean/{other['id']}")
        self.assertEqual(resp.get_json()["pipeSize"], "225")

    # ------------------------------------------------------------------
    # delete
    # ------------------------------------------------------------------
    def test_delete_without_confirmation_is_blocked(self):
        created = self._create({"categoryName": "CCTV"})
        url = f"/api/pr2-clean/{created['id']}"

        for body in ({}, {"userConfirmed": False}, {"userConfirmed": "true"}, {"userConfirmed": 1}, None):
            resp = self.client.delete(url, json=body) if body is not None else self.client.delete(url)
            self.assertEqual(resp.status_code, 400, msg=body)
            payload = resp.get_json()
            self.assertEqual(payload["error"], "DELETION BLOCKED: User confirmation required")
            self.assertEqual(payload["configId"], created["id"])
            self.assertIn("explicit user approval", payload["message"])

        self.assertEqual(self.client.get(url).status_code, 200)
        self.assertEqual(self._count(), 1)

    def test_delete_with_confirmation_returns_snapshot_and_logs(self):
        created = self._create({"categoryId": "cctv", "categoryName": "CCTV"})
        url = f"/api/pr2-clean/{created['id']}"

        with self.assertLogs("drainwise.services.pr2_configuration_service", level="WARNING") as logs:
            resp = self.client.delete(url, json={"userConfirmed": True})

        self.assertEqual(resp.status_code, 200)
        body = resp.get_json()
        self.assertEqual(body["message"], "Configuration deleted successfully")
        self.assertEqual(body["deletedConfig"]["id"], created["id"])
        self.assertEqual(body["deletedConfig"]["categoryName"], "CCTV")

        audit = "\n".join(logs.output)
        self.assertIn(f"configId={created['id']}", audit)
        self.assertIn("categoryId=cctv", audit)
        self.assertIn("categoryName='CCTV'", audit)
        self.assertIn("timestamp=", audit)

        self.assertEqual(self.client.get(url).status_code, 404)

    def test_delete_foreign_record_is_not_found(self):
        created = self._create({"categoryName": "CCTV"}, owner="owner-a")
        resp = self.client.delete(
            f"/api/pr2-clean/{created['id']}", json={"userConfirmed": True}, headers=owner_header("owner-b")
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self._count(), 1)

    # ------------------------------------------------------------------
    # app level
    # ------------------------------------------------------------------
    def test_unknown_api_path_returns_json_404(self):
        resp = self.client.get("/api/does-not-exist")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["error"], "API endpoint not found")

    def test_wrong_method_returns_json_405(self):
        resp = self.client.patch("/api/pr2-clean")
        self.assertEqual(resp.status_code, 405)

    def test_option_registry(self):
        resp = self.client.get("/api/pr2-clean/option-registry")
        self.assertEqual(resp.status_code, 200)
        body = resp.get_json()
        self.assertEqual([s["section"] for s in body["sections"]], ["pricing", "quantity", "minQuantity", "additional"])
        self.assertEqual(body["sections"][0]["options"][0], {"key": "dayRate", "label": "Day Rate"})
        self.assertEqual(body["mathOperators"], ["N/A", "+", "-", "×", "÷"])
        self.assertEqual(body["pipeSizes"][0], "100")
        self.assertEqual(body["pipeSizes"][-1], "1500")
        self.assertEqual(len(body["pipeSizes"]), 15)
        self.assertIn("3.5t Van", body["vehicleTypes"])
        self.assertEqual(body["defaults"]["pipeSize"], "150")

    def test_health_check(self):
        resp = self.client.get("/api/health-check")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["database"], "connected")

    def test_request_log_carries_route_parameters(self):
        created = self._create({"categoryId": "cctv"}, owner="owner-a")

        with self.assertLogs("drainwise.utils.request_logger", level="INFO") as logs:
            self.client.get(f"/api/pr2-clean/{created['id']}/rows/150-1501", headers=owner_header("owner-a"))
            self.client.get("/api/pr2-clean/4242", headers=owner_header("owner-a"))

        ok_line, missing_line = logs.records
        ok = json.loads(ok_line.getMessage().split("REQUEST_LOG: ", 1)[1])
        self.assertEqual(ok["owner_id"], "owner-a")
        self.assertEqual(ok["config_id"], created["id"])
        self.assertEqual(ok["pipe_size_key"], "150-1501")
        self.assertEqual(ok["status_code"], 200)
        self.assertNotIn("cpu_user_time", ok)
        self.assertEqual(missing_line.levelname, "WARNING")


if __name__ == "__main__":
    unittest.main()
