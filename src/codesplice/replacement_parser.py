"""
Scan free-form LLM response text for method implementations.

The scan is purely textual: a method starts at a line that looks like a
signature ending in ``{`` and ends where brace depth returns to zero. Nested
blocks (including methods of anonymous classes) are only tracked through that
depth count, so they stay inside the enclosing method's text.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List

from .models import Replacement

logger = logging.getLogger(__name__)

_KEYWORDS = r"(?:if|else|for|while|do|switch|case|catch|try|finally|return|new|throw|synchronized|assert)"

SIGNATURE_START_PATTERN = re.compile(
    r"^(?:[ \t]*@[\w$.]+(?:\([^)\n]*\))?[ \t]*\n)*"  # annotation lines
    r"[ \t]*(?:@[\w$.]+(?:\([^)\n]*\))?[ \t]+)*"  # inline annotations
    r"(?:(?:public|protected|private|static|final|abstract|synchronized|native|strictfp|default)[ \t]+)*"
    r"(?:<(?:[^<>\n]|<[^<>\n]*>)+>[ \t]+)?"  # type parameters, one level of nesting
    rf"(?:(?!{_KEYWORDS}\b)[\w$.]+(?:<[^()\n{{}};=]*>)?(?:\[\])*[ \t]+)?"  # return type
    rf"(?!{_KEYWORDS}\b)(?P<name>[A-Za-z_$][\w$]*)[ \t]*\([^)]*\)"
    r"(?:\s*throws\s+[\w$.,\s]+?)?\s*\{",
    re.MULTILINE,
)


def find_block_end(text: str, open_brace: int) -> int:
    """
    Position just past the brace that closes the one at ``open_brace``.

    Returns len(text) when the block is never closed.
    """
    depth = 0
    for i in range(open_brace, len(text)):
        char = text[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return len(text)


def scan_replacements(response_text: str) -> List[Replacement]:
    """
    Find every top-level method implementation in ``response_text``.

    Args:
        response_text: Raw collaborator response (may include prose or fences)

    Returns:
        Replacements in the order they appear
    """
    if not response_text:
        return []

    found: List[Replacement] = []
    consumed_until = 0
    for match in SIGNATURE_START_PATTERN.finditer(response_text):
        if match.start() < consumed_until:
            continue
        end = find_block_end(response_text, match.end() - 1)
        body = response_text[match.start():end].strip("\n").rstrip()
        consumed_until = end
        found.append(Replacement(name=match.group("name"), implementation_text=body))

    return found


def parse_replacements(response_text: str) -> Dict[str, str]:
    """
    Build the name -> implementation map used by process_marked_file.

    Overloads sharing a name are joined, in order, into one entry.
    """
    replacements: Dict[str, str] = {}
    for replacement in scan_replacements(response_text):
        if replacement.name in replacements:
            replacements[replacement.name] += "\n\n" + replacement.implementation_text
        else:
            replacements[replacement.name] = replacement.implementation_text

    logger.info(f"[ReplacementParser] Parsed {len(replacements)} method implementation(s) from response")
    return replacements
