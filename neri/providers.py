"""
Request builders and response decoders for the supported AI providers.

Each provider is a pair of plain functions registered in ``PROVIDERS``;
adding a provider means writing its ``build`` and ``decode`` functions and
registering them, nothing else.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, NamedTuple

from .config import ProviderConfig
from .errors import HTTPStatusError, MalformedResponseError, UnsupportedProviderError

logger = logging.getLogger(__name__)

INSTRUCTION = (
    "You are an assistant that converts natural language into Unix/Linux commands. "
    "Reply ONLY with the command, without explanations."
)

MAX_TOKENS = 100


@dataclass(frozen=True)
class ProviderRequest:
    payload: Dict[str, Any]
    endpoint: str
    headers: Dict[str, str] = field(default_factory=dict)


class Provider(NamedTuple):
    build: Callable[[ProviderConfig, str], ProviderRequest]
    decode: Callable[[Any], str]


def _user_prompt(prompt: str) -> str:
    return f"{INSTRUCTION} User: {prompt}"


def _field(container: Any, key: str, where: str) -> Any:
    """Return ``container[key]`` or None when missing; ``container`` must be an object."""
    if container is None:
        return None
    if not isinstance(container, dict):
        raise MalformedResponseError(f"Expected an object for '{where}', got {type(container).__name__}")
    return container.get(key)


def _first(items: Any, where: str) -> Any:
    """Return the first element of a list, or None for a missing or empty list."""
    if items is None:
        return None
    if not isinstance(items, list):
        raise MalformedResponseError(f"Expected a list for '{where}', got {type(items).__name__}")
    return items[0] if items else None


def _text(value: Any, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedResponseError(f"Expected a string for '{where}', got {type(value).__name__}")
    return value


# --- openai -----------------------------------------------------------------

def build_openai(config: ProviderConfig, prompt: str) -> ProviderRequest:
    payload = {
        "model": config.model,
        "messages": [
            {"role": "system", "content": INSTRUCTION},
            {"role": "user", "content": prompt},
        ],
        "max_tokens": MAX_TOKENS,
    }
    headers = {}
    if config.api_key:
        headers["Authorization"] = f"Bearer {config.api_key}"
    return ProviderRequest(payload=payload, endpoint=config.base_url, headers=headers)


def decode_openai(data: Any) -> str:
    choice = _first(_field(data, "choices", "choices"), "choices")
    message = _field(choice, "message", "choices[0]")
    return _text(_field(message, "content", "choices[0].message"), "choices[0].message.content")


# --- gemini -----------------------------------------------------------------

def build_gemini(config: ProviderConfig, prompt: str) -> ProviderRequest:
    endpoint = f"{config.base_url}/{config.model}:generateContent?key={config.api_key}"
    payload = {
        "contents": [
            {"parts": [{"text": _user_prompt(prompt)}]},
        ],
    }
    return ProviderRequest(payload=payload, endpoint=endpoint)


def decode_gemini(data: Any) -> str:
    candidate = _first(_field(data, "candidates", "candidates"), "candidates")
    content = _field(candidate, "content", "candidates[0]")
    part = _first(_field(content, "parts", "candidates[0].content"), "candidates[0].content.parts")
    return _text(_field(part, "text", "candidates[0].content.parts[0]"), "candidates[0].content.parts[0].text")


# --- ollama -----------------------------------------------------------------

def build_ollama(config: ProviderConfig, prompt: str) -> ProviderRequest:
    payload = {
        "model": config.model,
        "prompt": _user_prompt(prompt),
        "stream": False,
    }
    return ProviderRequest(payload=payload, endpoint=config.base_url)


def decode_ollama(data: Any) -> str:
    return _text(_field(data, "response", "response"), "response")


PROVIDERS: Dict[str, Provider] = {
    "openai": Provider(build_openai, decode_openai),
    "gemini": Provider(build_gemini, decode_gemini),
    "ollama": Provider(build_ollama, decode_ollama),
}


def get_provider(name: str) -> Provider:
    try:
        return PROVIDERS[name]
    except KeyError:
        raise UnsupportedProviderError(name) from None


def build_request(config: ProviderConfig, prompt: str) -> ProviderRequest:
    """Build the provider-shaped request for ``prompt``."""
    provider = get_provider(config.provider)
    request = provider.build(config, prompt)
    logger.info(f"Built {config.provider} request for model '{config.model}'")
    return request


def decode_response(provider_name: str, status_code: int, body: str) -> str:
    """
    Extract the generated text from a provider response.

    Error statuses are reported before the body is looked at.
    """
    if status_code >= 400:
        raise HTTPStatusError(status_code, body)

    provider = get_provider(provider_name)
    try:
        data = json.loads(body)
    except ValueError as e:
        raise MalformedResponseError(f"Invalid JSON in {provider_name} response: {e}") from e

    # a JSON null decodes to empty text
    if data is not None and not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a JSON object in {provider_name} response")
    return provider.decode(data)
