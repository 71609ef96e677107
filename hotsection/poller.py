"""Fixed-interval scheduler that keeps a HotloadableSection fresh."""
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .config_reload import ConfigReloader
from .errors import HotloadError
from .parsers import create_section
from .section import HotloadableSection


def format_contents(section: HotloadableSection) -> str:
    return "{" + ", ".join(f"{name!r}: {record!r}" for name, record in section.items()) + "}"


class SectionPoller:
    """Call ``refresh()`` on a fixed cadence and report the outcome.

    Refresh errors are printed and polling continues, so a file that is
    briefly missing or half-written is picked up again on a later tick.
    When a ``config_reloader`` is given, interval changes take effect on the
    next tick and watch setting changes rebuild the section.
    """

    def __init__(
        self,
        section: HotloadableSection,
        interval_s: float = 0.5,
        parser_name: Optional[str] = None,
        config_reloader: Optional[ConfigReloader] = None,
        on_reload: Optional[Callable[[HotloadableSection], None]] = None,
    ):
        self.section = section
        self.interval_s = interval_s
        self.parser_name = parser_name
        self.on_reload = on_reload
        self._config_reloader = config_reloader
        self._stop_requested = threading.Event()

    def poll_once(self) -> bool:
        """Refresh once. Returns True when the file was reloaded."""
        try:
            reloaded = self.section.refresh()
        except HotloadError as e:
            print(f"[WARN] {e}")
            return False

        if reloaded:
            print(f"[INFO] File reloaded: {format_contents(self.section)}")
            if self.on_reload is not None:
                self.on_reload(self.section)
        return reloaded

    def apply_config(self, config: Dict[str, Any]) -> None:
        """Apply poll/watch settings from a freshly loaded config.

        Nothing is changed when any setting is rejected.
        """
        interval_s = float(config["poll"]["interval_s"])
        watch = config["watch"]
        path = Path(watch["path"])
        delimiter = watch["delimiter"]
        parser_name = watch["parser"]

        section = None
        if (
            path != self.section.path
            or delimiter != self.section.delimiter
            or parser_name != self.parser_name
        ):
            section = create_section(path, delimiter, parser_name)

        self.interval_s = interval_s
        if section is not None:
            self.section = section
            self.parser_name = parser_name
            print(f"[INFO] Now watching {path} (delimiter={delimiter!r}, parser={parser_name})")

    def _maybe_reload_runtime_config(self) -> None:
        if self._config_reloader is None:
            return
        try:
            updated_config = self._config_reloader.poll()
            if updated_config is not None:
                self.apply_config(updated_config)
        except Exception as e:
            print(f"[WARN] Config hot-reload skipped: {e}")
            return

        if updated_config is not None:
            print("[INFO] Hot-reloaded config: watch/poll")

    def run(self) -> None:
        """Poll until stop() is called."""
        self._stop_requested.clear()
        print(f"[INFO] Watching {self.section.path} every {self.interval_s}s")
        while not self._stop_requested.is_set():
            self._maybe_reload_runtime_config()
            self.poll_once()
            self._stop_requested.wait(self.interval_s)

    def stop(self) -> None:
        self._stop_requested.set()
