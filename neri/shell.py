import logging
import signal
import sys
import threading
from typing import Callable, Optional

from rich.console import Console

from .errors import TranslationError
from .logger import TranslationLogger
from .translator import Translator
from .ui import console as default_console
from .ui import display_api_key_warning, display_banner, display_error, display_translation

logger = logging.getLogger(__name__)

PROMPT = "neri> "
EXIT_WORDS = ("exit", "quit")


def should_exit(text: str) -> bool:
    return text.strip().lower() in EXIT_WORDS


class Shell:
    """Interactive read-translate-print loop. Commands are never executed."""

    def __init__(
        self,
        translator: Optional[Translator] = None,
        history: Optional[TranslationLogger] = None,
        console: Optional[Console] = None,
        input_func: Optional[Callable[[str], str]] = None,
    ):
        self.translator = translator or Translator()
        self.history = history
        self.console = console or default_console
        self.input_func = input_func or self.console.input
        self.running = True

    def check_api_key(self):
        config = self.translator.provider_config()
        if config.requires_api_key and not config.api_key:
            logger.warning(f"No API key configured for provider '{config.provider}'")
            display_api_key_warning(config, console=self.console)

    def _handle_sigterm(self, signum, frame):
        self.console.print("\nReceived SIGTERM, shutting down...")
        self.running = False
        sys.exit(0)

    def setup_signal_handlers(self):
        # signal handlers can only be installed from the main thread
        if threading.current_thread() is threading.main_thread():
            signal.signal(signal.SIGTERM, self._handle_sigterm)

    def handle(self, user_text: str) -> bool:
        """Translate one request and display the outcome. Returns True on success."""
        config = self.translator.provider_config()
        try:
            translation = self.translator.translate(user_text)
        except TranslationError as e:
            display_error(e, console=self.console)
            self._record(user_text, config, raw=e.raw, error=str(e))
            return False

        display_translation(translation.raw, translation.command, console=self.console)
        self._record(user_text, config, raw=translation.raw, command=translation.command)
        return True

    def _record(self, user_text, config, raw="", command="", error=None):
        if self.history is not None:
            self.history.log_translation(
                user_text, config.provider, config.model, raw=raw, command=command, error=error
            )

    def run(self) -> int:
        display_banner(self.console)
        self.check_api_key()
        self.setup_signal_handlers()

        while self.running:
            try:
                user_text = self.input_func(PROMPT)
            except KeyboardInterrupt:
                self.console.print("^C (use 'exit' to quit)")
                continue
            except EOFError:
                self.console.print()
                break

            user_text = user_text.strip()
            if not user_text:
                continue
            if should_exit(user_text):
                self.console.print("Exiting...")
                break

            try:
                self.handle(user_text)
            except KeyboardInterrupt:
                self.console.print("^C (use 'exit' to quit)")

        self.console.print("Goodbye!")
        return 0
