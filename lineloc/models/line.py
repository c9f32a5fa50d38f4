"""Data models for localized lines."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .markup import MarkupParseResult

CHARACTER_ATTRIBUTE = "character"
CHARACTER_NAME_PROPERTY = "name"


class LineStatus(str, Enum):
    """Delivery status of a line, advanced by the presentation layer."""
    PENDING = "pending"
    DELIVERING = "delivering"
    DELIVERED = "delivered"


@dataclass(frozen=True)
class LineAudio:
    """Audio asset resolved for a line."""
    asset: Path
    language: str


@dataclass
class LocalizedLine:
    """A line, ready to be presented in the selected language."""

    id: str
    raw_text: str
    text: MarkupParseResult
    substitutions: List[str] = field(default_factory=list)
    status: LineStatus = LineStatus.PENDING
    audio: Optional[LineAudio] = None

    @property
    def character_name(self) -> Optional[str]:
        """The speaking character's name, if the line has one."""
        attribute = self.text.get_attribute(CHARACTER_ATTRIBUTE)
        if attribute is None:
            return None
        return attribute.get_string(CHARACTER_NAME_PROPERTY)

    @property
    def text_without_character_name(self) -> MarkupParseResult:
        """The parsed text with the character name span removed."""
        attribute = self.text.get_attribute(CHARACTER_ATTRIBUTE)
        if attribute is None:
            return self.text
        return self.text.delete_range(attribute)
