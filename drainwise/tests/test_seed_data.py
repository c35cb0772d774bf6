# drainwise/tests/test_seed_data.py

import unittest

from drainwise.config import TestingConfig
from drainwise.extensions import db
from drainwise.models.pr2_configuration import PR2Configuration
from drainwise.models.standard_category import StandardCategory
from drainwise.seed_data import DEFAULT_CATEGORIES, seed_standard_categories
from drainwise.server import create_app


class SeedDataTestCase(unittest.TestCase):

    def setUp(self):
        self.app = create_app(TestingConfig)

    def tearDown(self):
        self.app.extensions["autosave"].shutdown()
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    def test_seeding_is_repeatable(self):
        with self.app.app_context():
            self.assertEqual(seed_standard_categories(), len(DEFAULT_CATEGORIES))
            self.assertEqual(seed_standard_categories(), 0)
            self.assertEqual(StandardCategory.query.count(), len(DEFAULT_CATEGORIES))
            jet_vac = StandardCategory.query.filter_by(category_id="cctv-jet-vac").first()
            self.assertEqual(jet_vac.category_name, "CCTV/Jet Vac")

    def test_cli_command_with_sample(self):
        runner = self.app.test_cli_runner()

        result = runner.invoke(args=["seed-categories", "--with-sample"])

        self.assertEqual(result.exit_code, 0, msg=result.output)
        self.assertIn(f"Standard categories created: {len(DEFAULT_CATEGORIES)}", result.output)
        self.assertIn("Sample configuration created for test-user", result.output)

        result = runner.invoke(args=["seed-categories", "--with-sample"])
        self.assertIn("Standard categories created: 0", result.output)
        self.assertIn("Sample configuration already present", result.output)

        with self.app.app_context():
            sample = PR2Configuration.query.filter_by(owner_id="test-user", category_id="cctv").one()
            self.assertEqual(sample.category_name, "TP1 - 150mm CCTV")

    def test_seeded_sample_is_a_template_for_other_pipe_sizes(self):
        self.app.test_cli_runner().invoke(args=["seed-categories", "--with-sample"])
        client = self.app.test_client()

        resp = client.post("/api/pr2-clean/auto-detect-pipe-size", json={"categoryId": "cctv", "pipeSize": "300"})

        self.assertEqual(resp.get_json()["configuration"]["categoryName"], "TP1 - 300mm CCTV")


if __name__ == "__main__":
    unittest.main()
