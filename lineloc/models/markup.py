"""Parsed markup text and its attributes."""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple, Union

MarkupValue = Union[str, int, float, bool]


@dataclass(frozen=True)
class MarkupAttribute:
    """A named span of plain text with typed properties."""

    name: str
    position: int
    length: int
    properties: Dict[str, MarkupValue] = field(default_factory=dict)
    source_position: int = 0

    @property
    def end(self) -> int:
        return self.position + self.length

    def get_string(self, key: str) -> Optional[str]:
        """Get a property rendered as a string, or None if absent."""
        if key not in self.properties:
            return None
        value = self.properties[key]
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


@dataclass(frozen=True)
class MarkupParseResult:
    """Plain text with markup removed, plus the attributes found in it."""

    text: str
    attributes: Tuple[MarkupAttribute, ...] = ()

    def get_attribute(self, name: str) -> Optional[MarkupAttribute]:
        """Return the first attribute with the given name, if any."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def text_for_attribute(self, attribute: MarkupAttribute) -> str:
        """Return the span of plain text covered by an attribute."""
        if attribute.end > len(self.text):
            raise ValueError(
                f"Attribute {attribute.name!r} extends past the end of the text"
            )
        return self.text[attribute.position:attribute.end]

    def delete_range(self, attribute: MarkupAttribute) -> "MarkupParseResult":
        """
        Return a new result with the attribute's span removed.

        The attribute itself is dropped. Attributes after the span are
        shifted left, attributes overlapping it are trimmed, and attributes
        wholly inside it are dropped.
        """
        start = attribute.position
        end = attribute.end
        deleted = attribute.length

        if end > len(self.text):
            raise ValueError(
                f"Attribute {attribute.name!r} extends past the end of the text"
            )

        text = self.text[:start] + self.text[end:]

        attributes = []
        for other in self.attributes:
            if other is attribute:
                continue

            if other.end <= start:
                # Entirely before the deleted span
                attributes.append(other)
            elif other.position >= end:
                attributes.append(replace(other, position=other.position - deleted))
            elif other.position >= start and other.end <= end:
                # Swallowed by the deleted span; zero-length markers stay put
                if other.length == 0:
                    attributes.append(replace(other, position=start))
            elif other.position < start and other.end > end:
                attributes.append(replace(other, length=other.length - deleted))
            elif other.position < start:
                attributes.append(replace(other, length=start - other.position))
            else:
                attributes.append(
                    replace(other, position=start, length=other.end - end)
                )

        return MarkupParseResult(text=text, attributes=tuple(attributes))
