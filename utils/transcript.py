"""
JSON Lines transcript of arbiter exchanges
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class ExchangeTranscript:
    """Appends every line sent to or received from the arbiter"""

    def __init__(self, log_file: Optional[Union[str, Path]] = "jsonl/exchanges.jsonl"):
        self.log_file = Path(log_file) if log_file else None
        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def log_message(self, message: str, direction: str):
        if self.log_file is None:
            return
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "direction": direction,
            "message": message
        }
        try:
            with open(self.log_file, "a") as f:
                f.write(json.dumps(log_entry) + "\n")
        except OSError as e:
            logger.error(f"Failed to write transcript entry: {e}")
