import logging
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from steamvault.client import SteamVault  # noqa: E402
from steamvault.resources.tags_types import _normalize_category, _validate_label  # noqa: E402


logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stdout,
    force=True,
)


class TagsTypesTests(unittest.TestCase):
    def test_normalize_category(self):
        self.assertEqual(_normalize_category(" RAM "), "ram")
        self.assertEqual(_normalize_category("others"), "others")
        self.assertIsNone(_normalize_category("storage"))
        self.assertIsNone(_normalize_category(1))

    def test_validate_label(self):
        self.assertIsNone(_validate_label("ram", "8GB"))
        self.assertIsNone(_validate_label("vga", 4))
        self.assertIsNone(_validate_label("others", "SSD Required"))
        self.assertIsNotNone(_validate_label("ram", "lots"))
        self.assertIsNotNone(_validate_label("others", "   "))
        self.assertIsNotNone(_validate_label("others", True))
        self.assertIsNotNone(_validate_label("others", None))


class TagsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.client = SteamVault(project_id="", api_key="", local_path=Path(self._tmp.name) / "catalog.json")
        self.tags = self.client.tags

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_add_and_get(self):
        created = self.tags.add("ram", " 8GB ")
        self.assertEqual(created["label"], "8GB")
        self.assertEqual(created["category"], "ram")
        self.assertEqual(self.tags.get(created["id"]), created)

    def test_add_invalid_category(self):
        self.assertIsNone(self.tags.add("storage", "1TB"))
        with self.assertRaises(ValueError):
            self.tags.add("storage", "1TB", validation="strict")

    def test_add_ordered_label_needs_magnitude(self):
        self.assertIsNone(self.tags.add("vga", "Fast GPU"))
        with self.assertRaises(ValueError):
            self.tags.add("vga", "Fast GPU", validation="strict")
        self.assertEqual(self.tags.list(), [])

    def test_update_keeps_category(self):
        created = self.tags.add("ram", "8GB")
        updated = self.tags.update(created["id"], label="12GB")
        self.assertEqual(updated, {"id": created["id"], "label": "12GB", "category": "ram"})

    def test_update_rejects_bad_label(self):
        created = self.tags.add("ram", "8GB")
        self.assertIsNone(self.tags.update(created["id"], label="plenty"))
        self.assertIsNone(self.tags.update(created["id"]))
        self.assertIsNone(self.tags.update("missing", label="4GB"))

    def test_delete_leaves_dangling_references(self):
        tag = self.tags.add("others", "SSD Required")
        game = self.client.games.add({"name": "Game", "requirementIds": [tag["id"]]})
        self.assertTrue(self.tags.delete(tag["id"]))
        self.assertIsNone(self.tags.get(tag["id"]))
        self.assertEqual(self.client.games.get(game["id"])["requirementIds"], [tag["id"]])

    def test_delete_cascade_prunes_games(self):
        ssd = self.tags.add("others", "SSD Required")
        ram = self.tags.add("ram", "8GB")
        game = self.client.games.add({"name": "Game", "requirementIds": [ram["id"], ssd["id"]]})
        self.assertTrue(self.tags.delete([ssd["id"]], cascade=True))
        self.assertEqual(self.client.games.get(game["id"])["requirementIds"], [ram["id"]])

    def test_delete_invalid_ids(self):
        self.assertFalse(self.tags.delete(""))
        with self.assertRaises(ValueError):
            self.tags.delete([], validation="strict")

    def test_grouped(self):
        self.tags.add("ram", "16GB")
        self.tags.add("ram", "8GB")
        self.tags.add("others", "SSD Required")
        groups = self.tags.grouped()
        self.assertEqual([tag["label"] for tag in groups["ram"]], ["8GB", "16GB"])
        self.assertEqual(groups["vga"], [])
        self.assertEqual([tag["label"] for tag in groups["others"]], ["SSD Required"])

    def test_grouped_none_when_list_fails(self):
        with patch.object(self.tags, "list", return_value=None):
            self.assertIsNone(self.tags.grouped())


if __name__ == "__main__":
    unittest.main()
