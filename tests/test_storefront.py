import logging
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import requests

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from steamvault.exceptions import NotAvailable  # noqa: E402
from steamvault.storefront import SteamStore, StorefrontClient, draft_from_appdetails  # noqa: E402
from steamvault.storefront_types import (  # noqa: E402
    FREE_PRICE,
    NO_MIN_REQUIREMENTS,
    NO_RECOMMENDED_REQUIREMENTS,
    UNRELEASED_PRICE,
)


logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stdout,
    force=True,
)


class FakeResponse:
    def __init__(self, payload=None, status_error=None):
        self._payload = payload
        self._status_error = status_error

    def raise_for_status(self):
        if self._status_error:
            raise self._status_error

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, payloads):
        self.payloads = payloads
        self.calls = []

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append((method, url))
        payload = self.payloads(url) if callable(self.payloads) else self.payloads
        if isinstance(payload, Exception):
            raise payload
        return FakeResponse(payload)


APPDETAILS_DATA = {
    "name": "Portal 2",
    "is_free": False,
    "header_image": "https://cdn.example/620/header.jpg",
    "about_the_game": "<p>Puzzles.</p>",
    "short_description": "Short.",
    "price_overview": {"final_formatted": "$9.99"},
    "pc_requirements": {"minimum": "<strong>Minimum:</strong> Memory: 2 GB RAM", "recommended": ""},
    "movies": [{"mp4": {"480": "low.mp4", "max": "high.mp4"}, "webm": {"max": "high.webm"}}],
    "release_date": {"coming_soon": False, "date": "18 Apr, 2011"},
    "screenshots": [{"path_full": "s1.jpg"}, {"id": 2}, {"path_full": "s2.jpg"}],
}


class DraftTests(unittest.TestCase):
    def test_full_mapping(self):
        draft = draft_from_appdetails("620", APPDETAILS_DATA)
        self.assertEqual(draft["steamAppId"], "620")
        self.assertEqual(draft["name"], "Portal 2")
        self.assertEqual(draft["price"], "$9.99")
        self.assertEqual(draft["description"], "<p>Puzzles.</p>")
        self.assertEqual(draft["minRequirements"], "<strong>Minimum:</strong> Memory: 2 GB RAM")
        self.assertEqual(draft["recommendedRequirements"], NO_RECOMMENDED_REQUIREMENTS)
        self.assertEqual(draft["trailerUrl"], "high.mp4")
        self.assertEqual(draft["releaseDate"], "18 Apr, 2011")
        self.assertEqual(draft["screenshots"], ["s1.jpg", "s2.jpg"])

    def test_sparse_mapping(self):
        draft = draft_from_appdetails(10, {"name": "Old", "pc_requirements": [], "is_free": True})
        self.assertEqual(draft["steamAppId"], "10")
        self.assertEqual(draft["price"], FREE_PRICE)
        self.assertEqual(draft["minRequirements"], NO_MIN_REQUIREMENTS)
        self.assertEqual(draft["trailerUrl"], "")
        self.assertEqual(draft["releaseDate"], "")
        self.assertEqual(draft["screenshots"], [])

    def test_unpriced_game_is_coming_soon(self):
        self.assertEqual(draft_from_appdetails("1", {"name": "Soon"})["price"], UNRELEASED_PRICE)

    def test_webm_trailer_fallback(self):
        draft = draft_from_appdetails("1", {"movies": [{"webm": {"max": "only.webm"}}]})
        self.assertEqual(draft["trailerUrl"], "only.webm")


class SteamStoreTests(unittest.TestCase):
    def test_search(self):
        session = FakeSession({"total": 2, "items": [{"id": 620, "name": "Portal 2"}, {"name": "no id"}]})
        store = SteamStore(proxy="", session=session)
        self.assertEqual(store.search(" portal "), [{"appId": "620", "name": "Portal 2"}])
        self.assertEqual(
            session.calls[0][1],
            "https://store.steampowered.com/api/storesearch/?term=portal&l=english&cc=US",
        )

    def test_search_blank_query(self):
        session = FakeSession({})
        store = SteamStore(proxy="", session=session)
        self.assertEqual(store.search("   "), [])
        self.assertEqual(session.calls, [])

    def test_search_failure_returns_empty(self):
        store = SteamStore(proxy="", session=FakeSession(requests.ConnectionError("offline")))
        self.assertEqual(store.search("portal"), [])

    def test_proxy_wraps_encoded_url(self):
        session = FakeSession({"items": []})
        store = SteamStore(proxy="https://proxy.example/?url=", session=session)
        store.search("a b")
        self.assertEqual(
            session.calls[0][1],
            "https://proxy.example/?url="
            "https%3A%2F%2Fstore.steampowered.com%2Fapi%2Fstoresearch%2F%3Fterm%3Da%2Bb%26l%3Denglish%26cc%3DUS",
        )

    def test_details(self):
        session = FakeSession({"620": {"success": True, "data": APPDETAILS_DATA}})
        store = SteamStore(proxy="", session=session)
        draft = store.details("620")
        self.assertEqual(draft["name"], "Portal 2")
        self.assertIn("appdetails?appids=620", session.calls[0][1])

    def test_details_unknown_app(self):
        session = FakeSession({"999": {"success": False}})
        store = SteamStore(proxy="", session=session)
        self.assertIsNone(store.details("999"))
        store.raise_on_error = True
        with self.assertRaises(NotAvailable):
            store.details("999")

    def test_details_invalid_app_id(self):
        session = FakeSession({})
        store = SteamStore(proxy="", session=session)
        self.assertIsNone(store.details("abc"))
        self.assertEqual(session.calls, [])

    def test_details_network_error(self):
        store = SteamStore(proxy="", session=FakeSession(requests.Timeout("slow")))
        self.assertIsNone(store.details("620"))
        store.raise_on_error = True
        with self.assertRaises(NotAvailable):
            store.details("620")

    def test_details_many_parallel_skips_failures(self):
        def payloads(url):
            app_id = url.split("appids=")[1].split("&")[0]
            if app_id == "2":
                return {"2": {"success": False}}
            return {app_id: {"success": True, "data": {"name": f"Game {app_id}"}}}

        store = SteamStore(proxy="", session=FakeSession(payloads))
        drafts = store.details_many(["1", "2", "3"], max_workers=2)
        self.assertEqual(sorted(draft["name"] for draft in drafts), ["Game 1", "Game 3"])

    def test_details_many_serial_keeps_order(self):
        store = SteamStore(proxy="")

        def fake_details(app_id, timeout=None):
            if app_id == "2":
                raise RuntimeError("boom")
            return {"steamAppId": app_id, "name": app_id}

        with patch.object(store, "details", side_effect=fake_details):
            drafts = store.details_many([1, 2, 3], max_workers=0)
        self.assertEqual([draft["steamAppId"] for draft in drafts], ["1", "3"])

    def test_details_many_empty(self):
        self.assertEqual(SteamStore(proxy="").details_many([]), [])

    def test_base_client_requires_details(self):
        with self.assertRaises(TypeError):
            StorefrontClient()  # type: ignore[abstract]

        class PartialStore(StorefrontClient):
            pass

        with self.assertRaises(TypeError):
            PartialStore()  # type: ignore[abstract]


if __name__ == "__main__":
    unittest.main()
