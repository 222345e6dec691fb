#!/usr/bin/env python3
"""Run the site adapters over a saved page snapshot.

A snapshot is a JSON object holding the page ``url`` and ``html`` and,
optionally, ``ready_state``, ``script_state`` and ``frames``. The wire
result is printed as JSON, followed by the host profile with ``--profile``.
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

# Add project root to path so we can import modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.extractor import AdapterFactory, is_debug_enabled  # noqa: E402
from src.extractor.base import PageContext, Site, get_config_manager  # noqa: E402
from src.extractor.base.config import DEFAULT_CONFIG_PATH  # noqa: E402
from src.extractor.profile import build_profile  # noqa: E402


def main():
    parser = argparse.ArgumentParser(
        description="Extract the active item identity from a page snapshot"
    )
    parser.add_argument("snapshot", type=Path, help="Path to a JSON page snapshot")
    parser.add_argument(
        "--site",
        choices=[site.value for site in Site],
        help="Use this site's adapter instead of matching the snapshot URL",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to extractor config file",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Also print the profile built from the result",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print caught extraction faults and pipeline aborts",
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    try:
        with open(args.snapshot, encoding="utf-8") as f:
            snapshot = json.load(f)
        debug = args.debug or is_debug_enabled(args.config)
        context = PageContext.from_snapshot(snapshot, debug=debug)

        def debug_sink(message: str) -> None:
            print(message, file=sys.stderr)

        if args.site:
            adapter = AdapterFactory.create_adapter(Site(args.site), args.config, debug_sink)
        else:
            adapter = AdapterFactory.adapter_for(context, args.config, debug_sink)
        if adapter is None:
            print(f"No enabled adapter matches {context.url}", file=sys.stderr)
            print(json.dumps([True, None]))
            return 1

        logging.getLogger(__name__).info(f"Using the {adapter.display_label} adapter")
        result = adapter.try_extract(context)
        print(json.dumps(result.to_wire(), ensure_ascii=False))

        if args.profile:
            limits = get_config_manager(args.config or DEFAULT_CONFIG_PATH).get_profile_limits()
            page_result = build_profile(result, adapter, limits)
            profile = asdict(page_result.profile) if page_result.profile is not None else None
            if profile is not None:
                profile["site"] = profile["site"].value
            print(
                json.dumps(
                    {"status": page_result.status.value, "profile": profile},
                    ensure_ascii=False,
                    indent=2,
                )
            )
        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.debug:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
