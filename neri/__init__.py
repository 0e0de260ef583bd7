"""
neri: an AI assisted mini shell.

Converts natural language requests into a single shell command using a
pluggable AI provider (OpenAI, Gemini or a local Ollama server). Commands are
displayed, never executed.
"""

__version__ = "0.1.0"

from .errors import ConnectionFailedError, NoCommandExtractedError, TranslationError
from .sanitizer import sanitize_command
from .translator import Translation, Translator, translate
