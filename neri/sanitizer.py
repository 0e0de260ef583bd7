"""
Extraction of a single command line from free-form model output.

Models are asked for a bare command but often wrap it in markdown or put a
sentence of explanation in front of it. ``sanitize_command`` tries a fixed,
ordered list of strategies, from the most explicit signal (a fenced code
block) down to "first non-blank line", and returns the first non-empty
result.
"""
import re
from typing import Callable, Optional, Tuple

FENCED_BLOCK_RE = re.compile(r"```(?:shell|bash|zsh|sh)?[ \t]*\n?(.*?)\n?```", re.DOTALL)
INLINE_CODE_RE = re.compile(r"`([^`\n]+)`")
PROMPT_MARKER_RE = re.compile(r"^(?:\$|\s*neri>|\s*Emiliano>)")

EXPLANATION_PREFIXES = (
    "para",
    "usa",
    "este",
    "el comando",
    "la respuesta",
    "you can",
    "this will",
    "use",
    "the command",
)

Strategy = Callable[[str], Optional[str]]


def first_non_blank_line(text: str) -> str:
    for line in text.split("\n"):
        line = line.strip()
        if line:
            return line
    return ""


def looks_like_explanation(line: str) -> bool:
    return line.lower().startswith(EXPLANATION_PREFIXES)


def strip_prompt_marker(line: str) -> str:
    return PROMPT_MARKER_RE.sub("", line, count=1).strip()


def fenced_block(text: str) -> Optional[str]:
    match = FENCED_BLOCK_RE.search(text)
    if not match:
        return None
    command = first_non_blank_line(match.group(1))
    if command:
        return command
    # An empty fence ends the search here instead of falling through to the
    # inline and plain-line strategies.
    return first_non_blank_line(text)


def inline_code(text: str) -> Optional[str]:
    match = INLINE_CODE_RE.search(text)
    if not match:
        return None
    return match.group(1).strip()


def best_plain_line(text: str) -> Optional[str]:
    for line in text.split("\n"):
        line = line.strip()
        if line and not looks_like_explanation(line):
            return strip_prompt_marker(line)
    return None


STRATEGIES: Tuple[Strategy, ...] = (
    fenced_block,
    inline_code,
    best_plain_line,
    first_non_blank_line,
)


def sanitize_command(text: str) -> str:
    """
    Reduce model output to the single line most likely to be the command.

    Never raises; returns an empty string only when ``text`` has no
    non-blank line.
    """
    text = (text or "").strip()
    for strategy in STRATEGIES:
        command = strategy(text)
        if command:
            return command
    return ""
