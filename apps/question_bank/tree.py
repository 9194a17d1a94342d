# apps/question_bank/tree.py
"""
Category tree flattening.

Builds, per context, the ordered list of selectable options for a category
tree given as flat parent-pointer records. Works on plain records (anything
exposing id, parent_id, context_id and name), never touches the database.

Each context is loaded once into an id-indexed table; parent links that point
nowhere, to another context or to the node itself are reattached to the
context's top category, and nodes only reachable through a cycle are
reattached too. Traversal then walks the table by id with a visited set, so it
always terminates and every node is emitted exactly once.
"""
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Mapping, Optional

from .constants import INDENT, TOP_CATEGORY_LABEL


@dataclass(frozen=True)
class CategoryRecord:
    id: int
    parent_id: Optional[int]
    context_id: Hashable
    name: str
    id_number: Optional[str] = None
    question_count: int = 0


@dataclass(frozen=True)
class CategoryOption:
    key: str
    label: str
    depth: int
    context_id: Hashable
    category_id: int
    is_top: bool = False
    question_count: Optional[int] = field(default=None)

    @property
    def is_enriched(self):
        return self.question_count is not None

    def as_dict(self):
        data = {
            "key": self.key,
            "label": self.label,
            "depth": self.depth,
            "context_id": self.context_id,
            "category_id": self.category_id,
            "is_top": self.is_top,
        }
        if self.is_enriched:
            data["question_count"] = self.question_count
        return data


def make_key(category_id, context_id):
    return f"{category_id},{context_id}"


def indented_name(name, depth):
    return INDENT * depth + name


def _sort_key(node):
    return (node.name.casefold(), node.id)


def _has_parent(node):
    return node.parent_id not in (None, 0)


class _ContextTree:
    """Indexed view of one context's categories."""

    def __init__(self, context_id, records):
        self.context_id = context_id
        self.nodes = {}
        for record in records:
            # First record wins on duplicate ids.
            self.nodes.setdefault(record.id, record)

        roots = sorted((n for n in self.nodes.values() if not _has_parent(n)), key=lambda n: n.id)
        self.top_id = roots[0].id if roots else None

        self.children = {node_id: [] for node_id in self.nodes}
        self.orphans = []
        for node in self.nodes.values():
            if node.id == self.top_id:
                continue
            parent_id = node.parent_id if _has_parent(node) else None
            if parent_id is None or parent_id == node.id or parent_id not in self.nodes:
                self._attach_to_top(node)
            else:
                self.children[parent_id].append(node)

        for siblings in self.children.values():
            siblings.sort(key=_sort_key)
        self.orphans.sort(key=_sort_key)

    def _attach_to_top(self, node):
        if self.top_id is None:
            self.orphans.append(node)
        else:
            self.children[self.top_id].append(node)

    def walk(self):
        """Yield (node, depth) pairs depth-first; depth 0 is the top (or a root)."""
        visited = set()
        yield from self._walk_from(self._starts(), visited)

        # Whatever is left is only reachable through a cycle.
        leftovers = sorted((n for n in self.nodes.values() if n.id not in visited), key=_sort_key)
        while leftovers:
            node = leftovers[0]
            start_depth = 1 if self.top_id is not None else 0
            yield from self._walk_from([(node, start_depth)], visited)
            leftovers = [n for n in leftovers if n.id not in visited]

    def _starts(self):
        starts = []
        if self.top_id is not None:
            starts.append((self.nodes[self.top_id], 0))
        starts.extend((node, 0) for node in self.orphans)
        return starts

    def _walk_from(self, starts, visited):
        stack = list(reversed(starts))
        while stack:
            node, depth = stack.pop()
            if node.id in visited:
                continue
            visited.add(node.id)
            yield node, depth
            for child in reversed(self.children.get(node.id, [])):
                if child.id not in visited:
                    stack.append((child, depth + 1))

    def descendants_of(self, category_id):
        if category_id not in self.nodes:
            return set()
        found = set()
        stack = list(self.children.get(category_id, []))
        while stack:
            node = stack.pop()
            if node.id in found or node.id == category_id:
                continue
            found.add(node.id)
            stack.extend(self.children.get(node.id, []))
        return found


def build_options(
    categories_by_context: Mapping[Hashable, Iterable],
    include_top: bool = False,
    with_counts: bool = False,
    exclude_subtree_of: Optional[int] = None,
    context_names: Optional[Mapping[Hashable, str]] = None,
) -> Dict[Hashable, List[CategoryOption]]:
    """
    Flatten each context's category tree into indented options.

    Args:
        categories_by_context: context id -> records of that context, top included
        include_top: emit the top category first, labelled "Top for <context>"
        with_counts: enrich every option with its question_count
        exclude_subtree_of: drop the descendants of this category id
        context_names: display names used for the top label (defaults to the id)

    Returns:
        context id -> ordered options, in the input context order
    """
    context_names = context_names or {}
    result = {}
    for context_id, records in categories_by_context.items():
        tree = _ContextTree(context_id, records)
        excluded = tree.descendants_of(exclude_subtree_of) if exclude_subtree_of else set()

        options = []
        for node, depth in tree.walk():
            if node.id in excluded:
                continue
            is_top = node.id == tree.top_id
            if is_top and not include_top:
                continue
            if is_top:
                label = TOP_CATEGORY_LABEL.format(context=context_names.get(context_id, context_id))
            else:
                shown_depth = depth if include_top or tree.top_id is None else depth - 1
                label = indented_name(node.name, shown_depth)
                depth = shown_depth
            options.append(
                CategoryOption(
                    key=make_key(node.id, context_id),
                    label=label,
                    depth=depth,
                    context_id=context_id,
                    category_id=node.id,
                    is_top=is_top,
                    question_count=(getattr(node, "question_count", 0) or 0) if with_counts else None,
                )
            )
        result[context_id] = options
    return result
