"""
Part tree of an inspected archive.

OOXML containers list their parts flat; directory records are optional and
frequently missing. The tree groups parts under their folders, creating
folder nodes for every ancestor path, and orders each level with folders
first and then by name.
"""

import logging
import typing
from dataclasses import dataclass, field

from ooxmlviewer.inspector.data_types import ArchiveEntry

logger = logging.getLogger(__name__)


@dataclass
class TreeNode:
    name: str
    path: str
    is_dir: bool
    size: int = 0
    content: str | None = None
    children: list["TreeNode"] = field(default_factory=list)

    def walk(self) -> typing.Iterator["TreeNode"]:
        """Depth-first iteration over this node and all descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def _parent_path(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""


def _base_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def _ensure_directory(lookup: dict[str, TreeNode], path: str) -> TreeNode:
    """Returns the folder node for ``path``, creating missing ancestors."""
    missing = []
    while path not in lookup:
        missing.append(path)
        path = _parent_path(path)

    parent = lookup[path]
    for directory in reversed(missing):
        node = TreeNode(name=_base_name(directory), path=directory, is_dir=True)
        parent.children.append(node)
        lookup[directory] = node
        parent = node
    return parent


def build_tree(entries: typing.Iterable[ArchiveEntry]) -> TreeNode:
    """
    Build a folder hierarchy from archive entries.

    Args:
        entries: Entries of an ArchiveSummary (or the summary itself).

    Returns:
        The root TreeNode with empty name and path.
    """
    root = TreeNode(name="", path="", is_dir=True)
    lookup: dict[str, TreeNode] = {"": root}

    for entry in sorted(entries, key=lambda e: e.path):
        if entry.is_dir:
            _ensure_directory(lookup, entry.path)
            continue

        parent = _ensure_directory(lookup, _parent_path(entry.path))
        parent.children.append(
            TreeNode(
                name=_base_name(entry.path),
                path=entry.path,
                is_dir=False,
                size=entry.size,
                content=entry.content,
            )
        )

    for node in root.walk():
        node.children.sort(key=lambda child: (not child.is_dir, child.name))

    logger.debug(f"Built part tree with {len(lookup)} folders")
    return root


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def iter_tree_lines(root: TreeNode, indent: str = "  ") -> typing.Iterator[str]:
    """Yields one indented line per node below ``root``."""
    stack = [(child, 0) for child in reversed(root.children)]
    while stack:
        node, level = stack.pop()
        pad = indent * level
        if node.is_dir:
            yield f"{pad}{node.name or '/'}/"
            stack.extend((child, level + 1) for child in reversed(node.children))
        else:
            yield f"{pad}{node.name}  ({format_size(node.size)})"
