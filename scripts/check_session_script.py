from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Allow `python scripts/check_session_script.py` from the repo root.
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from touchui.config import configure_logging
from touchui.core.config_resolver import get_script_settings, save_script_settings
from touchui.scripting import check_script


def main(argv: list[str] | None = None) -> int:
    settings = get_script_settings()

    parser = argparse.ArgumentParser(
        description="Check that a session script loads and defines its entry function (without calling it)."
    )
    parser.add_argument("--script", type=str, default=settings.script_name, help="Script resource name or dotted module path.")
    parser.add_argument("--entry", type=str, default=settings.entry_function, help="Entry function name.")
    parser.add_argument(
        "--resource-dir",
        action="append",
        default=None,
        help="Directory to search for file resources (repeatable). Defaults to the configured directories.",
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    parser.add_argument(
        "--save",
        action="store_true",
        help="If the check passes, write the script, entry and resource dirs to configs/active.json.",
    )

    args = parser.parse_args(argv)
    configure_logging()

    resource_dirs = args.resource_dir if args.resource_dir else list(settings.resource_dirs)
    result = check_script(args.script, args.entry, resource_dirs=resource_dirs)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif result.ok:
        print(f"OK: {args.script} defines {args.entry}()")
    else:
        print(f"FAILED: {result.error}")

    if args.save and result.ok:
        save_script_settings(
            script_name=args.script,
            entry_function=args.entry,
            resource_dirs=args.resource_dir,
        )
        if not args.json:
            print("Saved to configs/active.json")

    return 0 if result.ok else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
