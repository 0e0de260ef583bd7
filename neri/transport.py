import json
import logging
import re
from typing import Tuple

import requests

from .errors import TransportError
from .providers import ProviderRequest

logger = logging.getLogger(__name__)

TIMEOUT_SECONDS = 30


API_KEY_PARAM_RE = re.compile(r"(key=)[^&\s'\")]+")


def _redact(endpoint: str) -> str:
    # gemini carries the API key in the query string
    return endpoint.split("?", 1)[0]


def _redact_message(message: str) -> str:
    return API_KEY_PARAM_RE.sub(r"\1***", message)


def send(request: ProviderRequest, timeout: float = TIMEOUT_SECONDS) -> Tuple[int, str]:
    """
    POST the request payload as JSON.

    Args:
        request: The provider request to send.
        timeout: Seconds to wait before giving up.

    Returns:
        Tuple of (status_code, body). The status code is not interpreted.
    """
    headers = {"Content-Type": "application/json"}
    headers.update(request.headers)
    data = json.dumps(request.payload)

    logger.info(f"POST {_redact(request.endpoint)}")
    try:
        response = requests.post(request.endpoint, data=data, headers=headers, timeout=timeout)
    except (requests.exceptions.RequestException, ValueError) as e:
        # ValueError covers header values that cannot be encoded (UnicodeEncodeError)
        message = _redact_message(str(e))
        logger.error(f"Request to {_redact(request.endpoint)} failed: {message}")
        raise TransportError(f"HTTP request failed: {message}") from e

    logger.info(f"Response status: {response.status_code}")
    return response.status_code, response.text
