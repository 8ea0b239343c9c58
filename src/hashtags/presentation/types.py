"""Presentation types shared by the hashtag views.

Views do not draw anything themselves. ``render()`` returns a tree of
``RenderNode`` that a host draws (terminal, HTML template, tests).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class ViewState(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class RenderNode:
    """A node of the rendered view tree.

    Attributes:
        kind: Node type, e.g. ``tab``, ``button``, ``text``, ``post``.
        text: Plain text content.
        detail: Secondary text shown next to ``text`` (counts, ranges).
        html: Pre-escaped HTML content, when the node carries markup.
        active: Selected/checked state for tabs, sort buttons, checkboxes.
        disabled: Whether the action is unavailable.
        action: Callable run when the node is activated (may be async).
        children: Child nodes.
        data: Extra values for hosts (tag, prefix, post id ...).
    """

    kind: str
    text: str = ""
    detail: str = ""
    html: Optional[str] = None
    active: bool = False
    disabled: bool = False
    action: Optional[Callable[..., Any]] = field(default=None, repr=False, compare=False)
    children: list["RenderNode"] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)

    def walk(self):
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, kind: str) -> list["RenderNode"]:
        return [n for n in self.walk() if n.kind == kind]

    def find(self, kind: str, text: Optional[str] = None) -> Optional["RenderNode"]:
        for node in self.walk():
            if node.kind == kind and (text is None or node.text == text):
                return node
        return None

    def texts(self) -> list[str]:
        return [n.text for n in self.walk() if n.text]


def plural(count: int, singular: str, plural_form: Optional[str] = None) -> str:
    """``1 post`` / ``3 posts``"""
    word = singular if count == 1 else (plural_form or singular + "s")
    return f"{count} {word}"


def render_text(node: RenderNode, indent: int = 0) -> str:
    """Plain text rendering of a node tree for terminals and logs."""
    lines: list[str] = []
    _render_lines(node, indent, lines)
    return "\n".join(lines)


def _render_lines(node: RenderNode, indent: int, lines: list[str]) -> None:
    pad = "  " * indent
    if node.text:
        marker = ""
        if node.kind == "checkbox":
            marker = "[x] " if node.active else "[ ] "
        elif node.kind in ("tab", "sort") and node.active:
            marker = "* "
        detail = f"  {node.detail}" if node.detail else ""
        suffix = " (disabled)" if node.disabled and node.kind == "button" else ""
        lines.append(f"{pad}{marker}{node.text}{detail}{suffix}")
        indent += 1
    for child in node.children:
        _render_lines(child, indent, lines)
