"""Parser for the bracket markup used in line text."""

import re
from typing import Dict, List, Optional, Sequence

from ..models.markup import MarkupAttribute, MarkupParseResult, MarkupValue
from ..models.line import CHARACTER_ATTRIBUTE, CHARACTER_NAME_PROPERTY

SUBSTITUTION_PATTERN = re.compile(r"\{(\d+)\}")


def expand_substitutions(text: str, substitutions: Sequence[str]) -> str:
    """Replace {0}, {1}, ... with the matching substitution values."""
    def _replace(match: "re.Match") -> str:
        index = int(match.group(1))
        if index < len(substitutions):
            return substitutions[index]
        return match.group(0)

    return SUBSTITUTION_PATTERN.sub(_replace, text)


class _OpenMarker:
    __slots__ = ("name", "position", "properties", "source_position")

    def __init__(self, name: str, position: int, properties: Dict[str, MarkupValue], source_position: int):
        self.name = name
        self.position = position
        self.properties = properties
        self.source_position = source_position


class MarkupParser:
    """
    Parses line text into plain text plus attributes.

    Supported forms:
    - [name prop=value prop2="quoted value"] ... [/name]
    - [/] closes every open attribute
    - [name/] self-closing marker (zero length)
    - [name=value] shorthand for [name name=value]
    - \\[ and \\] for literal brackets

    A line starting with "Name: " and no explicit character attribute gets
    an implicit character attribute covering that prefix.
    """

    TAG_PATTERN = re.compile(
        r"\["
        r"(?P<close>/)?"
        r"(?P<body>(?:\"(?:[^\"\\]|\\.)*\"|[^\[\]\"])*?)"
        r"(?P<self_closing>/)?"
        r"\]"
    )

    NAME_PATTERN = re.compile(r"\s*(?P<name>[A-Za-z_][\w-]*)")

    PROPERTY_PATTERN = re.compile(
        r"\s*(?P<key>[A-Za-z_][\w-]*)\s*=\s*"
        r"(?:\"(?P<quoted>(?:[^\"\\]|\\.)*)\"|(?P<bare>[^\s\"\]]+))"
    )

    IMPLICIT_CHARACTER_PATTERN = re.compile(r"^(?P<name>[^:\n]*[^\s:])\s*:\s*")

    INT_PATTERN = re.compile(r"^-?\d+$")
    FLOAT_PATTERN = re.compile(r"^-?(?:\d+\.\d*|\.\d+)$")

    def __init__(self, detect_character: bool = True):
        self.detect_character = detect_character

    def parse(self, text: str) -> MarkupParseResult:
        """
        Parse a line of text.

        Args:
            text: Line text containing markup

        Returns:
            MarkupParseResult with markup removed from the text

        Raises:
            ValueError: On malformed or unbalanced markup
        """
        plain: List[str] = []
        length = 0
        open_markers: List[_OpenMarker] = []
        attributes: List[MarkupAttribute] = []

        i = 0
        while i < len(text):
            ch = text[i]

            if ch == "\\" and i + 1 < len(text) and text[i + 1] in "[]\\":
                plain.append(text[i + 1])
                length += 1
                i += 2
                continue

            if ch == "]":
                raise ValueError(f"Unexpected ']' at position {i}")

            if ch == "[":
                match = self.TAG_PATTERN.match(text, i)
                if not match:
                    raise ValueError(f"Unterminated markup starting at position {i}")
                self._handle_tag(match, length, open_markers, attributes)
                i = match.end()
                continue

            plain.append(ch)
            length += 1
            i += 1

        # Unclosed attributes run to the end of the line
        for marker in open_markers:
            attributes.append(self._close(marker, length))

        plain_text = "".join(plain)

        if self.detect_character and not any(a.name == CHARACTER_ATTRIBUTE for a in attributes):
            implicit = self._implicit_character(plain_text)
            if implicit is not None:
                attributes.append(implicit)

        attributes.sort(key=lambda a: (a.source_position, a.position))
        return MarkupParseResult(text=plain_text, attributes=tuple(attributes))

    def _handle_tag(
        self,
        match: "re.Match",
        position: int,
        open_markers: List[_OpenMarker],
        attributes: List[MarkupAttribute],
    ) -> None:
        body = match.group("body").strip()
        source_position = match.start()

        if match.group("close"):
            if body == "":
                # [/] closes everything
                while open_markers:
                    attributes.append(self._close(open_markers.pop(0), position))
                return

            for index in range(len(open_markers) - 1, -1, -1):
                if open_markers[index].name == body:
                    attributes.append(self._close(open_markers.pop(index), position))
                    return
            raise ValueError(f"Closing marker [/{body}] has no matching opening marker")

        name, properties = self._parse_body(body, source_position)

        if match.group("self_closing"):
            attributes.append(MarkupAttribute(
                name=name,
                position=position,
                length=0,
                properties=properties,
                source_position=source_position,
            ))
            return

        open_markers.append(_OpenMarker(name, position, properties, source_position))

    def _parse_body(self, body: str, source_position: int):
        name_match = self.NAME_PATTERN.match(body)
        if not name_match:
            raise ValueError(f"Markup at position {source_position} has no name")
        name = name_match.group("name")

        # [name=value] sets a property called name
        rest = body if body[name_match.end():].lstrip().startswith("=") else body[name_match.end():]

        properties: Dict[str, MarkupValue] = {}
        pos = 0
        while pos < len(rest):
            if rest[pos:].strip() == "":
                break
            prop_match = self.PROPERTY_PATTERN.match(rest, pos)
            if not prop_match:
                raise ValueError(f"Malformed property in markup [{body}]")
            properties[prop_match.group("key")] = self._parse_value(prop_match)
            pos = prop_match.end()

        return name, properties

    def _parse_value(self, match: "re.Match") -> MarkupValue:
        quoted = match.group("quoted")
        if quoted is not None:
            return re.sub(r"\\(.)", r"\1", quoted)

        bare = match.group("bare")
        if bare in ("true", "false"):
            return bare == "true"
        if self.INT_PATTERN.match(bare):
            return int(bare)
        if self.FLOAT_PATTERN.match(bare):
            return float(bare)
        return bare

    @staticmethod
    def _close(marker: _OpenMarker, position: int) -> MarkupAttribute:
        return MarkupAttribute(
            name=marker.name,
            position=marker.position,
            length=position - marker.position,
            properties=marker.properties,
            source_position=marker.source_position,
        )

    def _implicit_character(self, plain_text: str) -> Optional[MarkupAttribute]:
        match = self.IMPLICIT_CHARACTER_PATTERN.match(plain_text)
        if not match:
            return None
        return MarkupAttribute(
            name=CHARACTER_ATTRIBUTE,
            position=0,
            length=match.end(),
            properties={CHARACTER_NAME_PROPERTY: match.group("name").strip()},
            source_position=-1,
        )
