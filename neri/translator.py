import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from . import transport
from .config import Lookup, ProviderConfig, resolve_provider_config
from .errors import ConnectionFailedError, NoCommandExtractedError, ProviderError
from .providers import ProviderRequest, build_request, decode_response
from .sanitizer import sanitize_command

logger = logging.getLogger(__name__)

Sender = Callable[[ProviderRequest], Tuple[int, str]]


@dataclass(frozen=True)
class Translation:
    raw: str
    command: str


class Translator:
    """Turns a natural language request into a single shell command."""

    def __init__(self, lookup: Optional[Lookup] = None, sender: Optional[Sender] = None):
        """
        Args:
            lookup: Key -> value accessor for provider settings. Defaults to
                the environment merged with the config file.
            sender: Callable performing the HTTP exchange. Defaults to
                ``transport.send``.
        """
        self.lookup = lookup
        self.sender = sender or transport.send

    def provider_config(self) -> ProviderConfig:
        return resolve_provider_config(self.lookup)

    def fetch_raw(self, config: ProviderConfig, user_text: str) -> str:
        request = build_request(config, user_text)
        status_code, body = self.sender(request)
        return decode_response(config.provider, status_code, body)

    def translate(self, user_text: str) -> Translation:
        """
        Ask the provider for a command and extract it from the answer.

        Raises:
            ConnectionFailedError: The provider could not be used (unsupported
                provider, network failure, error status, malformed body).
            NoCommandExtractedError: The provider answered but nothing
                resembling a command was found. ``raw`` holds the answer.
        """
        config = self.provider_config()
        logger.info(f"Translating with provider '{config.provider}' (model '{config.model}')")

        try:
            raw = self.fetch_raw(config, user_text)
        except ProviderError as e:
            logger.error(f"Provider call failed: {e}")
            raise ConnectionFailedError(e) from e

        command = sanitize_command(raw)
        if not command:
            logger.warning("No command could be extracted from the provider answer")
            raise NoCommandExtractedError(raw)

        logger.info(f"Extracted command: {command}")
        return Translation(raw=raw, command=command)


def translate(user_text: str) -> Translation:
    """Translate ``user_text`` using the default configuration."""
    return Translator().translate(user_text)
