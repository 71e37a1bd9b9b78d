from __future__ import annotations

import re

from hab_bridge.core import settings
from hab_bridge.models.schemas import DisplayBlock, DisplayDocument, Item


MEMBERS_HEADING = "##### Members:"
MEMBER_SEPARATOR = "\n"

_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!])")


def _code_block(text: str) -> DisplayBlock:
    return DisplayBlock(kind="code", label=settings.CODE_BLOCK_LANGUAGE, text=text)


def _item_line(item: Item) -> str:
    return f"Item {item.name} | {item.state}"


def format_item(item: Item) -> DisplayDocument:
    """Hover document for an item that exists on the server.

    Groups list their members in server order, separated by a line break that
    is never emitted after the last member. Any other item only shows its state.
    """
    if not item.is_group:
        return DisplayDocument(blocks=[_code_block(item.state)])

    blocks = [
        _code_block(_item_line(item)),
        DisplayBlock(kind="markdown", text=MEMBERS_HEADING),
    ]
    members = item.members or []
    for index, member in enumerate(members):
        blocks.append(_code_block(_item_line(member)))
        if index < len(members) - 1:
            blocks.append(DisplayBlock(kind="text", text=MEMBER_SEPARATOR))
    return DisplayDocument(blocks=blocks)


def escape_markdown(text: str) -> str:
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text).replace("\n", "\n\n")


def render_block(block: DisplayBlock) -> str:
    if block.kind == "code":
        return f"\n```{block.label or ''}\n{block.text}\n```\n"
    if block.kind == "markdown":
        return block.text
    return escape_markdown(block.text)


def render_markdown(document: DisplayDocument) -> str:
    return "".join(render_block(block) for block in document.blocks)
