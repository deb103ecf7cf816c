"""Application context: runtime paths and the parsed config file.

Every service and router receives this object instead of individual path
strings.
"""

from __future__ import annotations

import json
import os


class AppContext:
    """Holds runtime directory paths for the application."""

    def __init__(
        self,
        *,
        cwd: str,
        data_dir: str,
        config_path: str,
    ) -> None:
        self._cwd = cwd
        self._data_dir = data_dir
        self._config_path = config_path

    @property
    def data_dir(self) -> str:
        return self._data_dir

    @property
    def config_path(self) -> str:
        return self._config_path

    # Logs stay in cwd, not in data_dir
    @property
    def logs_dir(self) -> str:
        return os.path.join(self._cwd, "logs")

    def ensure_dirs(self) -> None:
        """Create all required directories if they don't exist."""
        for d in (self.data_dir, self.logs_dir):
            os.makedirs(d, exist_ok=True)

    def read_config(self) -> dict:
        """Read config from file, returning empty dict if not found."""
        if not os.path.exists(self._config_path):
            return {}
        with open(self._config_path, "r", encoding="utf-8") as f:
            return json.load(f)
