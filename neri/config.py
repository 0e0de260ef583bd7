import os
import toml
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Any
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "ollama"

# provider -> (base url, model)
PROVIDER_DEFAULTS: Dict[str, tuple] = {
    "openai": ("https://api.openai.com/v1/chat/completions", "gpt-3.5-turbo"),
    "gemini": ("https://generativelanguage.googleapis.com/v1beta/models", "gemini-pro"),
    "ollama": ("http://localhost:11434/api/generate", "llama2"),
}

KEYED_PROVIDERS = ("openai", "gemini")

Lookup = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved provider settings for a single translation."""

    provider: str
    base_url: str = ""
    api_key: str = ""
    model: str = ""

    @property
    def requires_api_key(self) -> bool:
        return self.provider in KEYED_PROVIDERS

    def masked_api_key(self) -> str:
        if not self.api_key:
            return ""
        if len(self.api_key) > 8:
            return f"{self.api_key[:4]}...{self.api_key[-4:]}"
        return "****"


def _get_or_default(lookup: Lookup, key: str, default: str = "") -> str:
    value = lookup(key)
    if value:
        return str(value)
    return default


def resolve_provider_config(lookup: Optional[Lookup] = None) -> ProviderConfig:
    """
    Build the provider configuration from a key -> value lookup.

    Unknown providers are passed through untouched; they are rejected later
    when the request is built. This function never fails.
    """
    if lookup is None:
        lookup = get_config().get

    provider = _get_or_default(lookup, "AI_PROVIDER", DEFAULT_PROVIDER)
    defaults = PROVIDER_DEFAULTS.get(provider)
    if defaults is None:
        return ProviderConfig(provider=provider)

    base_url, model = defaults
    api_key = _get_or_default(lookup, "AI_API_KEY") if provider in KEYED_PROVIDERS else ""
    return ProviderConfig(
        provider=provider,
        base_url=_get_or_default(lookup, "AI_BASE_URL", base_url),
        api_key=api_key,
        model=_get_or_default(lookup, "AI_MODEL", model),
    )


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Configuration handler for neri."""

    config_dir: str = field(default_factory=lambda: os.environ.get("NERI_CONFIG_DIR") or os.path.expanduser("~/.config/neri"))
    config_file: Optional[str] = None
    _file_config: dict = field(init=False, repr=False)

    # Application Configuration
    log_dir: str = field(init=False)
    history_dir: str = field(init=False)
    max_history: int = field(init=False)
    verbose: bool = field(init=False)

    def __post_init__(self):
        """Post-initialization to set up dependent fields."""
        if self.config_file is None:
            self.config_file = os.path.join(self.config_dir, "config.toml")
        self._file_config = self._load_config_from_file()
        self.log_dir = self._get_config("NERI_LOG_DIR", os.path.join(self.config_dir, "logs"))
        self.history_dir = self._get_config("NERI_HISTORY_DIR", os.path.join(self.config_dir, "history"))
        self.max_history = int(self._get_config("NERI_MAX_HISTORY", 100))
        self.verbose = _as_bool(self._get_config("NERI_VERBOSE", False))

    def _load_config_from_file(self) -> dict:
        """Loads configuration from the TOML file, if there is one."""
        if not os.path.exists(self.config_file):
            return {}
        try:
            with open(self.config_file, 'r') as f:
                return toml.load(f)
        except (toml.TomlDecodeError, IOError) as e:
            logger.warning(f"Could not read config file at {self.config_file}: {e}")
            return {}

    def write_default_config(self) -> bool:
        """Creates a default configuration file. Returns False if one already exists."""
        if os.path.exists(self.config_file):
            return False
        os.makedirs(os.path.dirname(self.config_file) or ".", exist_ok=True)
        default_config = {
            "provider": {
                "AI_PROVIDER": DEFAULT_PROVIDER,
                "AI_BASE_URL": "",
                "AI_API_KEY": "",
                "AI_MODEL": "",
            },
            "application": {
                "NERI_LOG_DIR": os.path.join(self.config_dir, "logs"),
                "NERI_HISTORY_DIR": os.path.join(self.config_dir, "history"),
                "NERI_MAX_HISTORY": 100,
                "NERI_VERBOSE": False,
            },
        }
        with open(self.config_file, 'w') as f:
            toml.dump(default_config, f)
        self._file_config = default_config
        logger.info(f"Created default config file at: {self.config_file}")
        return True

    def _get_config(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Get a configuration value, prioritizing environment variables,
        then the config file, and finally a default value.
        Empty values count as unset.
        """
        # 1. Check environment variable
        value = os.environ.get(key)
        if value:
            return value

        # 2. Check config file
        for section in self._file_config.values():
            if isinstance(section, dict) and section.get(key) not in (None, ""):
                return section[key]

        # 3. Return default
        return default

    def get(self, key: str) -> Optional[str]:
        """Read-only lookup used by the provider resolver."""
        value = self._get_config(key)
        if value is None:
            return None
        return str(value)

    def provider_config(self) -> ProviderConfig:
        return resolve_provider_config(self.get)

    def __str__(self) -> str:
        """Return string representation of the configuration."""
        config_dict = self.__dict__.copy()
        del config_dict['_file_config']  # may contain the API key
        return str(config_dict)


# Singleton instance holder
_config_instance: Optional[Config] = None

def get_config() -> Config:
    """Returns the singleton Config instance."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance
