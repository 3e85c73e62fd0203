import sys
import unittest
from pathlib import Path

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from steamvault.tools.taxonomy import (  # noqa: E402
    category,
    compare_ordered,
    group_tags,
    infer_category,
)


class InferCategoryTests(unittest.TestCase):
    def test_ram_keyword(self):
        self.assertEqual(infer_category("8GB RAM"), "ram")
        self.assertEqual(infer_category("Ram 16"), "ram")

    def test_graphics_keywords(self):
        self.assertEqual(infer_category("4GB VGA"), "vga")
        self.assertEqual(infer_category("GPU 2GB"), "vga")
        self.assertEqual(infer_category("Graphics 6 GB"), "vga")
        self.assertEqual(infer_category("8GB VRAM"), "vga")

    def test_bare_gb_defaults_to_ram(self):
        self.assertEqual(infer_category("16 GB"), "ram")
        self.assertEqual(infer_category("32gb"), "ram")

    def test_everything_else_is_others(self):
        self.assertEqual(infer_category("SSD required"), "others")
        self.assertEqual(infer_category("DirectX 12"), "others")
        self.assertEqual(infer_category(""), "others")
        self.assertEqual(infer_category(8), "others")


class CategoryTests(unittest.TestCase):
    def test_stored_field_wins(self):
        tag = {"id": "t", "label": "8GB VRAM", "category": "ram"}
        self.assertEqual(category(tag), "ram")

    def test_stored_field_is_normalized(self):
        self.assertEqual(category({"id": "t", "label": "x", "category": " VGA "}), "vga")

    def test_missing_or_invalid_field_falls_back_to_inference(self):
        self.assertEqual(category({"id": "t", "label": "8GB RAM"}), "ram")
        self.assertEqual(category({"id": "t", "label": "SSD", "category": "storage"}), "others")

    def test_inferred_policy_ignores_field(self):
        tag = {"id": "t", "label": "4GB VGA", "category": "ram"}
        self.assertEqual(category(tag, "inferred"), "vga")


class OrderingTests(unittest.TestCase):
    def test_compare_ordered(self):
        small = {"label": "512MB"}
        large = {"label": "2GB"}
        self.assertEqual(compare_ordered(small, large), -1)
        self.assertEqual(compare_ordered(large, small), 1)
        self.assertEqual(compare_ordered({"label": "8GB"}, {"label": "8192MB"}), 0)

    def test_group_tags(self):
        tags = [
            {"id": "r16", "label": "16", "category": "ram"},
            {"id": "o2", "label": "Windows 11", "category": "others"},
            {"id": "v4", "label": "4GB", "category": "vga"},
            {"id": "r8", "label": "8GB", "category": "ram"},
            {"id": "o1", "label": "SSD", "category": "others"},
            {"id": "v1", "label": "1024MB", "category": "vga"},
        ]
        groups = group_tags(tags)
        self.assertEqual([t["id"] for t in groups["ram"]], ["r8", "r16"])
        self.assertEqual([t["id"] for t in groups["vga"]], ["v1", "v4"])
        self.assertEqual([t["id"] for t in groups["others"]], ["o2", "o1"])

    def test_group_tags_keeps_ties_in_input_order(self):
        tags = [
            {"id": "a", "label": "8GB", "category": "ram"},
            {"id": "b", "label": "8192MB", "category": "ram"},
        ]
        self.assertEqual([t["id"] for t in group_tags(tags)["ram"]], ["a", "b"])

    def test_group_tags_empty(self):
        self.assertEqual(group_tags([]), {"ram": [], "vga": [], "others": []})


if __name__ == "__main__":
    unittest.main()
