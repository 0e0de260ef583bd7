import json
import logging
import os
import time
from datetime import datetime
from typing import Dict, List, Optional

from rich.logging import RichHandler
from rich.console import Console
from logging.handlers import RotatingFileHandler

from .config import Config, get_config

logger = logging.getLogger(__name__)


def setup_logging(config: Optional[Config] = None):
    """Set up logging for the application."""
    config = config or get_config()
    # Ensure log directory exists
    os.makedirs(config.log_dir, exist_ok=True)
    log_file = os.path.join(config.log_dir, "neri.log")

    # Root logger configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO if config.verbose else logging.WARNING)

    # Console handler (with Rich)
    console = Console(stderr=True)
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True
    )
    rich_handler.setLevel(logging.INFO)

    # File handler (Rotating)
    file_handler = RotatingFileHandler(
        log_file, maxBytes=10*1024*1024, backupCount=5  # 10 MB per file, 5 backups
    )
    file_handler.setLevel(logging.INFO)
    file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(file_formatter)

    root_logger.addHandler(rich_handler)
    root_logger.addHandler(file_handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger.info(f"Logger initialized. Logs will be stored in {config.log_dir}")


class TranslationLogger:
    """
    Keeps a JSON record of every translation in the history directory.
    """

    def __init__(self, config: Optional[Config] = None):
        config = config or get_config()
        self.history_dir = config.history_dir
        self.max_history = max(config.max_history, 0)

    def log_translation(
        self,
        instruction: str,
        provider: str,
        model: str,
        raw: str = "",
        command: str = "",
        error: Optional[str] = None,
    ) -> str:
        """
        Log one translation to its own JSON file.

        Args:
            instruction: The user's natural language request
            provider: Provider that handled the request
            model: Model name sent to the provider
            raw: The provider's raw answer
            command: The extracted command (empty on failure)
            error: Error message, if the translation failed

        Returns:
            Path to the log file, or an empty string if nothing was written
        """
        if self.max_history == 0:
            return ""

        now = datetime.now()
        stem = os.path.join(self.history_dir, f"translation_{now.strftime('%Y%m%d_%H%M%S_%f')}")
        log_file = f"{stem}.json"
        suffix = 1
        while os.path.exists(log_file):
            log_file = f"{stem}_{suffix}.json"
            suffix += 1

        log_data = {
            "timestamp": int(time.time()),
            "datetime": now.isoformat(),
            "instruction": instruction,
            "provider": provider,
            "model": model,
            "raw": raw,
            "command": command,
            "error": error,
        }

        try:
            os.makedirs(self.history_dir, exist_ok=True)
            with open(log_file, 'w') as f:
                json.dump(log_data, f, indent=2)
            logger.info(f"Translation logged to {log_file}")
        except OSError as e:
            logger.error(f"Failed to log translation: {e}")
            return ""

        self._prune()
        return log_file

    def _log_files(self) -> List[str]:
        if not os.path.isdir(self.history_dir):
            return []
        files = [os.path.join(self.history_dir, f) for f in os.listdir(self.history_dir)
                 if f.startswith("translation_") and f.endswith(".json")]
        # File names embed the timestamp, newest first
        files.sort(reverse=True)
        return files

    def _prune(self):
        for stale in self._log_files()[self.max_history:]:
            try:
                os.remove(stale)
            except OSError as e:
                logger.warning(f"Failed to remove old history file {stale}: {e}")

    def get_history(self, limit: Optional[int] = None) -> List[Dict]:
        """
        Get translation history, newest first.

        Args:
            limit: Maximum number of history entries to return
        """
        log_files = self._log_files()
        if limit is not None:
            log_files = log_files[:limit]

        history = []
        for log_file in log_files:
            try:
                with open(log_file, 'r') as f:
                    history.append(json.load(f))
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to read log file {log_file}: {e}")
        return history
