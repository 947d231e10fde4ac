"""Response Parser: advisor text output to structured sections.

Advisors ask the completion service for this layout:

    Executive Summary: one paragraph
    Key Insights:
    - bullet
    Recommended Actions:
    Immediate:
    - bullet
    Short-term:
    - bullet
    Long-term:
    - bullet
    Success Metrics:
    - bullet
    Special Considerations:
    - bullet

Models rarely follow it exactly, so headings are matched case-insensitively
at line start with optional markdown (`###`, `**`, `__`, or a bullet directly
before bold text), numbering and a trailing colon. Bullets may use `-`, `•`,
`*` or `1.` prefixes. The parser is total: anything it cannot read becomes an
empty value.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)

_EMPHASIS = r"(?:\*\*|__)?"

# "### ", or a bullet directly followed by bold ("- **Immediate:**"). A bare
# bullet never starts a heading, so "* Immediate: freeze hiring" stays an item.
_HEADING_LEAD = r"^[ \t]*(?:#{1,6}[ \t]*|[-•*][ \t]*(?=\*\*|__))?"


def _heading_pattern(names: list[str]) -> re.Pattern:
    alternatives = "|".join(names)
    return re.compile(
        _HEADING_LEAD + _EMPHASIS + r"[ \t]*(?:\d+[.)][ \t]*)?" + _EMPHASIS
        + r"(?P<name>" + alternatives + r")"
        + r"[ \t]*(?:\([^)\n]*\))?[ \t]*" + _EMPHASIS + r"[ \t]*(?::|$)[ \t]*" + _EMPHASIS,
        re.IGNORECASE | re.MULTILINE,
    )


_SECTION_NAMES = {
    "executive_summary": r"executive[ \t]+summary",
    "key_insights": r"key[ \t]+insights",
    "recommended_actions": r"recommended[ \t]+actions",
    "success_metrics": r"success[ \t]+metrics",
    "special_considerations": r"special[ \t]+considerations",
}

_ACTION_NAMES = {
    "immediate": r"immediate(?:[ \t]+(?:actions?|priorities|steps))?",
    "short_term": r"short[ \t-]?term(?:[ \t]+(?:actions?|priorities|steps|goals))?",
    "long_term": r"long[ \t-]?term(?:[ \t]+(?:actions?|priorities|steps|goals))?",
}

SECTION_PATTERN = _heading_pattern(list(_SECTION_NAMES.values()))
ACTION_PATTERN = _heading_pattern(list(_ACTION_NAMES.values()))

# "- item", "• item", "* item" (not "**bold**"), "1. item", "2) item"
BULLET_PATTERN = re.compile(r"^[ \t]*(?:(?:[-•]|\*(?!\*))[ \t]*|\d+[.)][ \t]+)(?P<item>\S.*?)[ \t]*$")


@dataclass
class ParsedSections:
    executive_summary: str = ""
    key_insights: list[str] = field(default_factory=list)
    immediate: list[str] = field(default_factory=list)
    short_term: list[str] = field(default_factory=list)
    long_term: list[str] = field(default_factory=list)
    success_metrics: list[str] = field(default_factory=list)
    special_considerations: list[str] = field(default_factory=list)

    @property
    def has_content(self) -> bool:
        """An executive summary plus at least one populated list section."""
        lists = (
            self.key_insights,
            self.immediate,
            self.short_term,
            self.long_term,
            self.success_metrics,
            self.special_considerations,
        )
        return bool(self.executive_summary) and any(lists)


def _key_for(match: re.Match, names: dict[str, str]) -> Optional[str]:
    heading = match.group("name")
    for key, pattern in names.items():
        if re.fullmatch(pattern, heading, re.IGNORECASE):
            return key
    return None


def _split_sections(text: str, pattern: re.Pattern, names: dict[str, str]) -> dict[str, str]:
    """Map each heading key to the text between it and the next heading.

    The first occurrence of a heading wins.
    """
    matches = list(pattern.finditer(text))
    spans: dict[str, str] = {}
    for index, match in enumerate(matches):
        key = _key_for(match, names)
        if key is None or key in spans:
            continue
        end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
        spans[key] = text[match.end() : end]
    return spans


def extract_list(block: str) -> list[str]:
    """Bullet/numbered lines of `block`, prefix stripped. Other lines are ignored."""
    items = []
    for line in block.splitlines():
        match = BULLET_PATTERN.match(line)
        if match and re.search(r"\w", match.group("item")):
            items.append(match.group("item"))
    return items


def _extract_paragraph(block: str) -> str:
    lines = [line.strip() for line in block.splitlines() if line.strip()]
    return " ".join(lines)


def parse_advisor_response(text: Any) -> ParsedSections:
    """Parse advisor output into sections; never raises.

    Returns:
        ParsedSections. Non-string or blank input yields an empty shell.
    """
    if not isinstance(text, str) or not text.strip():
        return ParsedSections()

    try:
        text = text.replace("\r\n", "\n")
        sections = _split_sections(text, SECTION_PATTERN, _SECTION_NAMES)
        actions = _split_sections(sections.get("recommended_actions", ""), ACTION_PATTERN, _ACTION_NAMES)
        return ParsedSections(
            executive_summary=_extract_paragraph(sections.get("executive_summary", "")),
            key_insights=extract_list(sections.get("key_insights", "")),
            immediate=extract_list(actions.get("immediate", "")),
            short_term=extract_list(actions.get("short_term", "")),
            long_term=extract_list(actions.get("long_term", "")),
            success_metrics=extract_list(sections.get("success_metrics", "")),
            special_considerations=extract_list(sections.get("special_considerations", "")),
        )
    except Exception as e:
        logger.warning(f"Advisor response could not be parsed, treating as empty: {e}")
        return ParsedSections()
