"""Data models for classified document content."""

import json
from dataclasses import dataclass

from docforge.enums import BlockRole


@dataclass(frozen=True)
class TextBlock:
    """A role-tagged unit of text, in document reading order."""

    role: BlockRole
    text: str

    def to_dict(self) -> dict:
        return {"role": str(self.role), "text": self.text}

    @classmethod
    def from_dict(cls, data: dict) -> "TextBlock":
        """
        Build a block from its exchange form.

        Raises:
            ValueError: If the role is unknown or the text is not a string
        """
        text = data.get("text")
        if not isinstance(text, str):
            raise ValueError("Block text must be a string")
        return cls(role=BlockRole(data.get("role")), text=text)


PLACEHOLDER_BLOCK = TextBlock(role=BlockRole.BODY, text=" ")


def blocks_to_json(blocks: list[TextBlock]) -> str:
    """Serialize blocks as a JSON array of {role, text} objects."""
    return json.dumps([block.to_dict() for block in blocks], ensure_ascii=False)


def blocks_from_json(payload: str) -> list[TextBlock]:
    """Parse a JSON array of {role, text} objects."""
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError("Block payload must be a JSON array")
    return [TextBlock.from_dict(item) for item in data]
