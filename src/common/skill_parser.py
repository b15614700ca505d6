"""
Skill list parser for free-text provider responses.

Providers answer skill-suggestion prompts with a bulleted or numbered
list, sometimes wrapping long items onto a second line. Two formats are
accepted:

1. List items: "- X", "* X", "• X", "1. X", "1) X", "a. X", "A) X",
   "(1) X", "(a) X", "(A) X". A non-empty line that is not a list item
   and has no colon continues the previous item. Lines with a colon are
   treated as headings and skipped.
2. A single delimited line: "Python, SQL; Docker".

Anything else raises MalformedProviderResponse.
"""

import re
from typing import List

from src.common.error_handling import MalformedProviderResponse

LIST_ITEM_RE = re.compile(
    r"^\s*(?:[\-\*•]|\d+[\.\)]|[a-z][\.\)]|[A-Z][\.\)]|\(\d+\)|\([a-z]\)|\([A-Z]\))\s+(.+)$"
)
_DELIMITER_RE = re.compile(r"[,;]")


def parse_skill_list(content: str) -> List[str]:
    """
    Parse skills from a provider response.

    Args:
        content: Raw response text

    Returns:
        Skills in response order

    Raises:
        MalformedProviderResponse: If neither a list nor a delimited line
            can be found
    """
    if not content or not content.strip():
        raise MalformedProviderResponse("Empty skill response", raw=content)

    skills = _parse_list_items(content)
    if skills:
        return skills

    if not _DELIMITER_RE.search(content):
        raise MalformedProviderResponse(
            "Skill response has no list items and no comma/semicolon separators",
            raw=content,
        )

    skills = [part.strip() for part in _DELIMITER_RE.split(content) if part.strip()]
    if not skills:
        raise MalformedProviderResponse("Skill response split into nothing", raw=content)
    return skills


def _parse_list_items(content: str) -> List[str]:
    skills: List[str] = []
    for line in content.splitlines():
        match = LIST_ITEM_RE.match(line)
        if match:
            skills.append(match.group(1).strip())
        elif line.strip() and ":" not in line and skills:
            skills[-1] = f"{skills[-1]} {line.strip()}"
    return skills
