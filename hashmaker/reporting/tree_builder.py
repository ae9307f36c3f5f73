"""Rebuild the folder/file tree from the engine's flat hash records.

The engine emits records in pre-order. A path ending in the separator marks a
folder boundary; when the same folder path appears again while that folder is
the innermost open one, the second record is the folder's summary line and
closes it.

Example:
    >>> records = [
    ...     FlatHashRecord("\\\\docs\\\\", ""),
    ...     FlatHashRecord("\\\\docs\\\\a.txt", "AA"),
    ...     FlatHashRecord("\\\\docs\\\\", "BB"),
    ... ]
    >>> [n.path for n in build_tree(records)]
    ['\\\\docs\\\\', '\\\\docs\\\\']
"""

from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from hashmaker.models import FOLDER_SEPARATOR, FlatHashRecord, TreeNode


def build_tree(
    records: Iterable[FlatHashRecord], separator: str = FOLDER_SEPARATOR
) -> Tuple[TreeNode, ...]:
    """Rebuild the ordered tree of a flat record sequence.

    Nodes are first collected in an index arena (parent -> child indices),
    then materialised into frozen TreeNodes from the last index backwards.
    Children always have higher indices than their parent, so every child
    exists before its parent is built.

    Args:
        records: Flat records in engine emission order.
        separator: Trailing character that marks a folder boundary.

    Returns:
        Root nodes in input order. A folder whose summary never arrives stays
        open and keeps collecting the remaining records.
    """
    paths: List[str] = []
    hashes: List[str] = []
    summaries: List[bool] = []
    children: List[List[int]] = []
    roots: List[int] = []
    open_folders: List[int] = []

    for record in records:
        is_folder_marker = record.path.endswith(separator)
        is_repeated = bool(open_folders) and paths[open_folders[-1]] == record.path
        is_summary = is_folder_marker and is_repeated

        index = len(paths)
        paths.append(record.path)
        hashes.append(record.hash)
        summaries.append(is_summary)
        children.append([])

        if is_summary:
            open_folders.pop()

        siblings = children[open_folders[-1]] if open_folders else roots
        siblings.append(index)

        if is_folder_marker and not is_summary:
            open_folders.append(index)

    nodes: List[Optional[TreeNode]] = [None] * len(paths)
    for index in range(len(paths) - 1, -1, -1):
        nodes[index] = TreeNode(
            path=paths[index],
            hash=hashes[index],
            is_summary=summaries[index],
            children=tuple(nodes[child] for child in children[index]),
        )

    return tuple(nodes[index] for index in roots)


def iter_tree(roots: Sequence[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node depth-first, parents before children, in child order."""
    stack: List[TreeNode] = list(reversed(roots))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_tree_with_depth(roots: Sequence[TreeNode]) -> Iterator[Tuple[int, TreeNode]]:
    """Like iter_tree, also yielding the nesting depth (roots are depth 0)."""
    stack: List[Tuple[int, TreeNode]] = [(0, node) for node in reversed(roots)]
    while stack:
        depth, node = stack.pop()
        yield depth, node
        stack.extend((depth + 1, child) for child in reversed(node.children))
