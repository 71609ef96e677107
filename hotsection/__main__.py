"""Main entry point for hotsection."""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import get_config_path, load_config
from .config_reload import ConfigReloader
from .errors import HotloadError
from .parsers import PARSERS, create_section
from .poller import SectionPoller, format_contents


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="hotsection - watch a sectioned text file and reload it on change"
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="File to watch (default: [watch].path from config)"
    )
    parser.add_argument(
        "--delimiter",
        help="Section header prefix (default: [watch].delimiter from config)"
    )
    parser.add_argument(
        "--parser",
        choices=sorted(PARSERS),
        help="Line parser (default: [watch].parser from config)"
    )
    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between polls (default: [poll].interval_s from config)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.toml"
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Refresh once, print the sections and exit"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = _build_parser().parse_args(argv)

    config = load_config(path=args.config)
    if args.file:
        config["watch"]["path"] = args.file
    if args.delimiter is not None:
        config["watch"]["delimiter"] = args.delimiter
    if args.parser is not None:
        config["watch"]["parser"] = args.parser
    if args.interval is not None:
        config["poll"]["interval_s"] = args.interval

    watch = config["watch"]
    try:
        section = create_section(watch["path"], watch["delimiter"], watch["parser"])
    except ValueError as e:
        print(f"[ERR] {e}")
        sys.exit(2)

    if args.once:
        try:
            section.refresh()
        except HotloadError as e:
            print(f"[ERR] {e}")
            sys.exit(1)
        print(format_contents(section))
        return

    # Command line overrides pin the watch settings; only follow the config
    # file when nothing was overridden.
    overridden = any(
        value is not None for value in (args.file, args.delimiter, args.parser, args.interval)
    )
    config_reloader = None
    if not overridden:
        config_reloader = ConfigReloader(
            path_getter=lambda: args.config or get_config_path(),
            config=config,
            min_interval_s=0.5,
        )
        config_reloader.prime()

    poller = SectionPoller(
        section,
        interval_s=float(config["poll"]["interval_s"]),
        parser_name=watch["parser"],
        config_reloader=config_reloader,
    )
    try:
        poller.run()
    except KeyboardInterrupt:
        poller.stop()
        print("\n[INFO] Interrupted by user")


if __name__ == "__main__":
    main()
