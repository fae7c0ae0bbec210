"""House-style rules applied after generic block classification.

Each rule takes the classified block list and returns a rewritten one. Rules
run in order, so a rule sees the positions produced by the rules before it.
"""

import re
from typing import Protocol

from docforge.config import Settings, settings
from docforge.enums import BlockRole
from docforge.services.layout.models import TextBlock


class LayoutRule(Protocol):
    def apply(self, blocks: list[TextBlock]) -> list[TextBlock]: ...


class BrandMergeRule:
    """Merge a standalone brand line at the top with the paragraph that follows it.

    'ALETHRA' followed by 'Quarterly Report' becomes a single two-line title.
    """

    def __init__(self, tokens: list[str]):
        self.tokens = {token.strip().lower() for token in tokens if token.strip()}

    def apply(self, blocks: list[TextBlock]) -> list[TextBlock]:
        if len(blocks) < 2 or blocks[0].text.strip().lower() not in self.tokens:
            return blocks

        merged = TextBlock(role=BlockRole.TITLE, text=f"{blocks[0].text}\n{blocks[1].text}")
        return [merged, *blocks[2:]]


class CenteredNoticeRule:
    """Center short notices (e.g. 'Confidential') that appear in the front matter."""

    def __init__(self, keywords: list[str], front_matter: int = 4):
        words = [re.escape(word.strip()) for word in keywords if word.strip()]
        self.pattern = re.compile(rf"\b(?:{'|'.join(words)})\b", re.IGNORECASE) if words else None
        self.front_matter = front_matter

    def apply(self, blocks: list[TextBlock]) -> list[TextBlock]:
        if self.pattern is None:
            return blocks

        result: list[TextBlock] = []
        for index, block in enumerate(blocks):
            if (
                block.role == BlockRole.BODY
                and index < self.front_matter
                and self.pattern.search(block.text)
            ):
                block = TextBlock(role=BlockRole.CENTERED_BODY, text=block.text)
            result.append(block)
        return result


def default_rules(config: Settings | None = None) -> list[LayoutRule]:
    """Build the configured house-style rules, in application order."""
    config = config or settings
    return [
        BrandMergeRule(config.brand_tokens),
        CenteredNoticeRule(
            config.centered_notice_keywords, front_matter=config.front_matter_blocks
        ),
    ]
