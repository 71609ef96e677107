"""Hot reload of config.toml while the poller runs."""
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .config import load_config


def _load_strict(path: Path) -> Dict[str, Any]:
    return load_config(path=path, quiet=True, raise_on_error=True)


def _mtime_ns(path: Path) -> Optional[int]:
    try:
        return path.stat().st_mtime_ns
    except OSError:
        return None


class ConfigReloader:
    """Re-read the config file when its mtime advances.

    ``config`` always holds the last config that loaded cleanly. A version of
    the file that fails to load is reported once and skipped until the file
    changes again. Switching to a different config path starts over.
    """

    def __init__(
        self,
        path_getter: Callable[[], Optional[Path]],
        config: Dict[str, Any],
        loader: Callable[[Path], Dict[str, Any]] = _load_strict,
        min_interval_s: float = 0.5,
    ):
        self.path_getter = path_getter
        self.config = config
        self.loader = loader
        self.min_interval_s = min_interval_s
        self._path: Optional[Path] = None
        self._loaded_ns = 0
        self._rejected_ns: Optional[int] = None
        self._last_check_ts: Optional[float] = None

    def prime(self) -> None:
        """Treat the file as it is on disk now as already loaded into ``config``."""
        self._path = self.path_getter()
        self._loaded_ns = (_mtime_ns(self._path) if self._path else None) or 0
        self._rejected_ns = None

    def poll(self) -> Optional[Dict[str, Any]]:
        """Return the new config when the file changed and loaded, else None.

        Loader errors propagate; ``config`` is left as it was.
        """
        now = time.monotonic()
        if self._last_check_ts is not None and now - self._last_check_ts < self.min_interval_s:
            return None
        self._last_check_ts = now

        path = self.path_getter()
        if not path:
            return None
        if path != self._path:
            self._path = path
            self._loaded_ns = 0
            self._rejected_ns = None

        mtime_ns = _mtime_ns(path)
        if mtime_ns is None or mtime_ns <= self._loaded_ns or mtime_ns == self._rejected_ns:
            return None

        try:
            config = self.loader(path)
        except Exception:
            self._rejected_ns = mtime_ns
            raise

        self.config = config
        self._loaded_ns = mtime_ns
        self._rejected_ns = None
        return config
