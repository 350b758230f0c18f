"""Markdown parsing utility for documentation linting.

Extracts headings, sections and fenced code blocks. Uses only regex (no
external markdown libraries).
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass
class MarkdownSection:
    """A parsed markdown section.

    Attributes:
        heading: The heading text (without the # prefix).
        level: The heading level (1 for #, 2 for ##, etc.).
        content: The content under this heading until the next same/higher level heading.
    """

    heading: str
    level: int
    content: str


class MarkdownParser:
    """Parse markdown documents. All methods are static and stateless."""

    _HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+?)[ \t]*#*[ \t\r]*$", re.MULTILINE)
    _CODE_BLOCK_PATTERN = re.compile(
        r"^```([\w+-]*)[^\n]*\n(.*?)^```",
        re.MULTILINE | re.DOTALL,
    )

    @staticmethod
    def strip_code_blocks(content: str) -> str:
        """Blank out fenced code blocks so their lines are not read as headings.

        Length and line count are preserved, so offsets into the result are
        valid offsets into content.
        """
        return MarkdownParser._CODE_BLOCK_PATTERN.sub(
            lambda m: re.sub(r"[^\n]", " ", m.group(0)), content
        )

    @staticmethod
    def extract_all_sections(content: str) -> list[MarkdownSection]:
        """Extract all sections with their headings and content.

        Each section runs from its heading to the next heading of the same or
        higher level. Headings inside fenced code blocks are ignored.

        Args:
            content: Markdown content to parse.

        Returns:
            Sections in document order.
        """
        text = MarkdownParser.strip_code_blocks(content)
        headings = list(MarkdownParser._HEADING_PATTERN.finditer(text))
        sections: list[MarkdownSection] = []

        for i, match in enumerate(headings):
            level = len(match.group(1))
            end_pos = len(text)
            for later in headings[i + 1 :]:
                if len(later.group(1)) <= level:
                    end_pos = later.start()
                    break

            sections.append(
                MarkdownSection(
                    heading=match.group(2).strip(),
                    level=level,
                    content=content[match.end() : end_pos].strip(),
                )
            )

        return sections

    @staticmethod
    def extract_title(content: str) -> str | None:
        """Return the text of the first level-1 heading, if any."""
        for section in MarkdownParser.extract_all_sections(content):
            if section.level == 1:
                return section.heading
        return None

    @staticmethod
    def preamble(content: str) -> str:
        """Return the text before the first heading, stripped."""
        text = MarkdownParser.strip_code_blocks(content)
        match = MarkdownParser._HEADING_PATTERN.search(text)
        if match is None:
            return ""
        return content[: match.start()].strip()

    @staticmethod
    def extract_code_blocks(content: str) -> list[str]:
        """Extract fenced code blocks of any language.

        Returns:
            List of code block contents (without the fence markers).
        """
        return [m.group(2) for m in MarkdownParser._CODE_BLOCK_PATTERN.finditer(content)]
