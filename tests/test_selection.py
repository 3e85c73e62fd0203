import sys
import types
import unittest
from pathlib import Path

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from steamvault.tools.selection import choose_tags, tag_choices  # noqa: E402


class FakeSeparator:
    def __init__(self, line: str = "---------------") -> None:
        self._line = line

    def __str__(self) -> str:
        return self._line


def _install_fake_inquirer(answer=None):
    module = types.ModuleType("InquirerPy")
    resolver = types.ModuleType("InquirerPy.resolver")
    separator = types.ModuleType("InquirerPy.separator")
    calls = {"questions": None}

    def prompt(questions):
        calls["questions"] = questions
        return answer

    resolver.prompt = prompt
    separator.Separator = FakeSeparator
    module.resolver = resolver
    module.separator = separator
    sys.modules["InquirerPy"] = module
    sys.modules["InquirerPy.resolver"] = resolver
    sys.modules["InquirerPy.separator"] = separator
    return calls


class SelectionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tags = [
            {"id": "r16", "label": "16GB", "category": "ram"},
            {"id": "o1", "label": "SSD", "category": "others"},
            {"id": "r8", "label": "8GB", "category": "ram"},
        ]
        _install_fake_inquirer()

    def tearDown(self) -> None:
        sys.modules.pop("InquirerPy", None)
        sys.modules.pop("InquirerPy.resolver", None)
        sys.modules.pop("InquirerPy.separator", None)

    def test_tag_choices_grouped_and_ordered(self):
        choices = tag_choices(self.tags, selected=["o1"])
        self.assertEqual(
            [choice["value"] for choice in choices if isinstance(choice, dict)],
            ["r8", "r16", "o1"],
        )
        self.assertTrue(choices[-1]["enabled"])
        self.assertFalse(choices[1]["enabled"])

    def test_tag_choices_headers_are_separators(self):
        choices = tag_choices(self.tags)
        self.assertIsInstance(choices[0], FakeSeparator)
        self.assertIsInstance(choices[3], FakeSeparator)
        self.assertEqual(str(choices[0]), "-- RAM --")
        self.assertEqual(str(choices[3]), "-- Other requirements --")
        headers = [choice for choice in choices if not isinstance(choice, dict)]
        self.assertEqual(len(headers), 2)
        self.assertTrue(all(isinstance(header, FakeSeparator) for header in headers))

    def test_tag_choices_empty(self):
        self.assertEqual(tag_choices([]), [])

    def test_choose_tags_returns_selection(self):
        calls = _install_fake_inquirer({"tags": ["r8", "o1"]})
        self.assertEqual(choose_tags(self.tags), ["r8", "o1"])
        self.assertEqual(calls["questions"][0]["type"], "checkbox")
        self.assertIsInstance(calls["questions"][0]["choices"][0], FakeSeparator)

    def test_choose_tags_cancel(self):
        _install_fake_inquirer(None)
        self.assertIsNone(choose_tags(self.tags))

    def test_choose_tags_unexpected_answer(self):
        _install_fake_inquirer({"tags": "r8"})
        self.assertIsNone(choose_tags(self.tags))

    def test_choose_tags_without_tags(self):
        _install_fake_inquirer({"tags": ["x"]})
        self.assertEqual(choose_tags([]), [])


if __name__ == "__main__":
    unittest.main()
