"""CLI demo that browses the catalog with the compatibility filter.

Run with the virtual environment activated::

    python examples/demo_catalog.py

Set ``STEAMVAULT_PROJECT_ID`` / ``STEAMVAULT_API_KEY`` to read from Firestore;
without them the local catalog (``STEAMVAULT_LOCAL_PATH``) is used. Pass
``--seed`` to fill an empty local catalog with a few sample games.
"""

import logging
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from steamvault import FilterState, SteamVault
from steamvault.tools.selection import choose_tags

logging.basicConfig(level=logging.INFO)


def seed(vault: SteamVault) -> None:
    ram8 = vault.tags.add("ram", "8GB")
    ram16 = vault.tags.add("ram", "16GB")
    vga4 = vault.tags.add("vga", "4GB VRAM")
    ssd = vault.tags.add("others", "SSD Required")
    if not all((ram8, ram16, vga4, ssd)):
        print("Could not create sample tags.")
        return
    vault.games.add({"name": "Stardew Valley", "price": "$14.99", "requirementIds": []})
    vault.games.add({"name": "Portal 2", "price": "$9.99", "requirementIds": [ram8["id"]]})
    vault.games.add(
        {"name": "Cyberpunk 2077", "price": "$59.99", "requirementIds": [ram16["id"], vga4["id"], ssd["id"]]}
    )


def main() -> None:
    vault = SteamVault()
    print(f"Using {'Firestore project ' + vault.project_id if vault.is_configured else vault.local.path}")

    if "--seed" in sys.argv and not vault.load_all_games():
        seed(vault)

    tags = vault.load_all_tags()
    games = vault.load_all_games()
    print(f"Loaded {len(games)} games and {len(tags)} tags")

    selected = choose_tags(tags)
    if selected is None:
        return

    state = FilterState.from_ids(selected)
    search = input("Search by name (blank for all): ").strip()
    state = state.with_search(search)

    matches = state.apply(tags, games)
    print(f"\n{len(matches)} of {len(games)} games can run on this machine:")
    for game in matches:
        print(f"  {game.get('name')}  [{game.get('price') or '-'}]")


if __name__ == "__main__":
    main()
