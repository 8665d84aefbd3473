import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from frame.frame import Frame
from utils.logger import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def build_log_entry(
    frame: Frame, top_colors: List[dict], timestamp: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Build one statistics record.

    Args:
        frame: The sampled (downscaled) frame
        top_colors: Output of FrameAnalysis.color_stats
        timestamp: Defaults to now, local time

    Returns:
        dict: {timestamp (RFC 3339), screen_size ("WxH"), top_colors}
    """
    if timestamp is None:
        timestamp = datetime.now().astimezone()
    return {
        "timestamp": timestamp.isoformat(timespec="seconds"),
        "screen_size": frame.screen_size,
        "top_colors": top_colors,
    }


class ColorLog:
    """
    Statistics log stored as a single JSON array.

    Older versions wrote one JSON object per line; such files are migrated
    to the array format on the next append.
    """

    def __init__(self, path: str):
        self.path = path

    def read_entries(self) -> List[Any]:
        """Entries currently on disk. A missing or empty file has none."""
        try:
            # Undecodable bytes turn into lines that fail to parse and are dropped
            with open(self.path, "r", encoding="utf-8", errors="replace") as f:
                content = f.read()
        except FileNotFoundError:
            return []

        if not content.strip():
            return []

        try:
            data = json.loads(content)
            if isinstance(data, list):
                return data
        except json.JSONDecodeError:
            pass

        return self._recover_json_lines(content)

    def _recover_json_lines(self, content: str) -> List[Any]:
        """Parse newline-delimited JSON, dropping lines that do not parse."""
        entries = []
        for line in content.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        logger.info(f"Recovered {len(entries)} legacy entries from {self.path}")
        return entries

    def append(self, entry: Dict[str, Any]) -> None:
        """
        Add an entry and rewrite the whole file as an indented JSON array.

        Raises:
            OSError: If the file cannot be read or written
        """
        entries = self.read_entries()
        entries.append(entry)

        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
