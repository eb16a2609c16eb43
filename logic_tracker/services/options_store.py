from __future__ import annotations

import json
import logging
from pathlib import Path

from logic_tracker.core.settings import TrackerOptions, default_options, merge_options

logger = logging.getLogger(__name__)


class OptionsStore:
    def __init__(self, options_path: Path) -> None:
        self.options_path = options_path

    def load(self) -> TrackerOptions:
        if not self.options_path.exists():
            return default_options()
        try:
            payload = json.loads(self.options_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("ignoring unreadable options file %s", self.options_path)
            payload = {}
        return merge_options(payload)

    def save(self, options: TrackerOptions) -> None:
        self.options_path.parent.mkdir(parents=True, exist_ok=True)
        self.options_path.write_text(json.dumps(options.as_dict(), indent=2), encoding="utf-8")


def load_options(path: Path | None) -> TrackerOptions:
    if path is None:
        return default_options()
    return OptionsStore(path).load()
