"""Tests for core/yamlio.py YAML helpers."""

import datetime as _dt
import json
import tempfile
import unittest
from pathlib import Path

from tests.fixtures import has_pyyaml


@unittest.skipUnless(has_pyyaml(), "requires PyYAML")
class TestLoadDocument(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_and_empty(self):
        from core.yamlio import load_document

        self.assertIsNone(load_document(None))
        self.assertIsNone(load_document(""))
        self.assertIsNone(load_document(str(self.tmp / "nope.yaml")))
        blank = self.tmp / "blank.yaml"
        blank.write_text("  \n\t\n", encoding="utf-8")
        self.assertIsNone(load_document(str(blank)))

    def test_dates_are_revived(self):
        from core.yamlio import load_document

        path = self.tmp / "plan.yaml"
        path.write_text("events:\n  - startDate: 2025-01-15\n", encoding="utf-8")
        doc = load_document(str(path))
        self.assertEqual(doc["events"][0]["startDate"], _dt.date(2025, 1, 15))

    def test_json_export_loads(self):
        from core.yamlio import load_document

        path = self.tmp / "events.json"
        path.write_text(json.dumps([{"id": "a", "isRecurring": False}]), encoding="utf-8")
        self.assertEqual(load_document(str(path)), [{"id": "a", "isRecurring": False}])

    def test_invalid_yaml_is_a_value_error(self):
        from core.yamlio import load_document

        path = self.tmp / "broken.yaml"
        path.write_text("events: [\n", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_document(str(path))


@unittest.skipUnless(has_pyyaml(), "requires PyYAML")
class TestLoadConfig(unittest.TestCase):

    def test_missing_returns_empty(self):
        from core.yamlio import load_config

        self.assertEqual(load_config(None), {})
        self.assertEqual(load_config("/nonexistent/planner.yaml"), {})

    def test_mapping_required(self):
        from core.yamlio import load_config

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "list.yaml"
            path.write_text("- max_swim_lanes\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_config(str(path))

    def test_null_document_is_empty(self):
        from core.yamlio import load_config

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "null.yaml"
            path.write_text("~\n", encoding="utf-8")
            self.assertEqual(load_config(str(path)), {})


@unittest.skipUnless(has_pyyaml(), "requires PyYAML")
class TestDumpConfig(unittest.TestCase):

    def test_creates_parents_and_keeps_order(self):
        from core.yamlio import dump_config, load_config

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "out" / "2025" / "layout.yaml"
            data = {"year": 2025, "events": [{"id": "a", "swim_lane": 0}]}
            dump_config(str(path), data)
            text = path.read_text(encoding="utf-8")
            self.assertLess(text.find("year"), text.find("events"))
            self.assertEqual(load_config(str(path)), data)

    def test_unicode_titles(self):
        from core.yamlio import dump_config, load_config

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "plan.yaml"
            dump_config(str(path), {"title": "Fête nationale"})
            self.assertIn("Fête", path.read_text(encoding="utf-8"))
            self.assertEqual(load_config(str(path))["title"], "Fête nationale")


if __name__ == "__main__":
    unittest.main()
