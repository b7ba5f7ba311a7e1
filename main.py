from __future__ import annotations

"""Headless driver for the Unicode Atlas engine.

Builds the engine exactly as the presentation layer would, applies the
query given on the command line as if it came from a shared URL, and prints
what a UI would render.
"""

import argparse
import sys
from typing import Sequence

from PyQt6.QtCore import QCoreApplication, QEventLoop

from unicode_atlas.controllers.atlas_controller import AtlasController
from unicode_atlas.domain.character_record import CharacterRecord
from unicode_atlas.domain.enums import QueryKey, WindowStatus
from unicode_atlas.services.app_config import load_config
from unicode_atlas.services.location_query import MemoryLocationQuery, build_query_string
from unicode_atlas.services.log_setup import configure_logging


def _format_record(rec: CharacterRecord) -> str:
    return "{:<10} {}  {}".format(rec.codepoint, rec.character, rec.name)


def _print_detail(rec: CharacterRecord) -> None:
    print("Codepoint: {}".format(rec.codepoint))
    print("Character: {}".format(rec.character))
    print("Name:      {}".format(rec.name))
    print("Category:  {}".format(rec.display_category))
    print("Block:     {}".format(rec.unicode_block))
    if rec.alternative_names:
        print("Also:      {}".format(", ".join(rec.alternative_names)))
    if rec.description:
        print("About:     {}".format(rec.description))
    if rec.decimal_entity:
        print("Entities:  {} {} {}".format(rec.decimal_entity, rec.hex_entity or "", rec.named_entity or "").rstrip())


def _pump_until(app: QCoreApplication, done) -> None:
    # Block until the next timer or posted event instead of spinning.
    while not done():
        app.processEvents(QEventLoop.ProcessEventsFlag.WaitForMoreEvents)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Browse the Unicode character catalog.")
    parser.add_argument("--data", default=None, help="Catalog JSON path or URL.")
    parser.add_argument("--settings", default=None, help="settings.yaml used for preferences.")
    parser.add_argument("--search", default="")
    parser.add_argument("--category", default="")
    parser.add_argument("--block", default="")
    parser.add_argument("--char", default="", help="Codepoint to open, e.g. U+0041.")
    parser.add_argument("--pages", type=int, default=0, help="Extra batches to reveal.")
    parser.add_argument("--coverage", action="store_true", help="Wait for the font coverage scan.")
    parser.add_argument("--list-filters", action="store_true", help="Print categories and blocks.")
    args = parser.parse_args(argv)

    config = load_config(settings_path=args.settings, data_source=args.data)
    configure_logging(config.debug)

    app = QCoreApplication.instance() or QCoreApplication(list(sys.argv[:1]))

    location = MemoryLocationQuery(
        build_query_string(
            {
                QueryKey.SEARCH.value: args.search,
                QueryKey.CATEGORY.value: args.category,
                QueryKey.BLOCK.value: args.block,
                QueryKey.CHAR.value: args.char,
            }
        )
    )
    controller = AtlasController.from_config(config, location=location)
    catalog = controller.load_catalog(config.data_source)

    if args.list_filters:
        print("Categories:")
        for c in controller.categories:
            print("  {}".format(c))
        print("Blocks:")
        for b in controller.blocks:
            print("  {}".format(b))

    for _ in range(max(0, args.pages)):
        if not controller.request_more():
            break
        _pump_until(app, lambda: not controller.window.is_loading)

    window = controller.window
    if window.status is WindowStatus.NO_RESULTS:
        print("No characters found.")
    else:
        for rec in window.revealed:
            print(_format_record(rec))
        suffix = " (filtered)" if controller.query.is_filtered else ""
        print("Showing {} of {} characters{}".format(len(window.revealed), window.total, suffix))

    favorites = controller.favorite_list()
    if favorites:
        print("Favorites: {}".format(" ".join(rec.character for rec in favorites)))

    if controller.selected is not None:
        print()
        _print_detail(controller.selected)

    if args.coverage:
        _pump_until(app, lambda: not controller.coverage_scan_running)
        print("Unsupported in current font: {} of {}".format(controller.unsupported_count, len(catalog)))

    controller.flush_url()
    if location.query_string:
        print("URL: /?{}".format(location.query_string))
    return 0


if __name__ == "__main__":
    sys.exit(main())
