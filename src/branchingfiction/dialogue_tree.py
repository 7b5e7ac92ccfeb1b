"""In-memory representation of a game as a tree of addressable dialogue nodes."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Tuple

ROOT_PARENT = -1
EMPTY_DESCRIPTION = " "


class NodeNotFoundError(KeyError):
    """Raised when a dialogue id is not present in the tree."""

    def __init__(self, node_id: int) -> None:
        super().__init__(f"Dialogue {node_id} does not exist")
        self.node_id = node_id


def _validate_text(value: str, *, field_name: str) -> str:
    """Validate and normalise required free-form text fields."""

    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string, got {type(value)!r}")

    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{field_name} must be a non-empty string")

    return stripped


def _normalise_description(value: str | None) -> str:
    if value is None:
        return EMPTY_DESCRIPTION
    if not isinstance(value, str):
        raise TypeError(f"description must be a string, got {type(value)!r}")
    stripped = value.strip()
    return stripped or EMPTY_DESCRIPTION


@dataclass(frozen=True)
class DialogueChoice:
    """A labelled edge leading from one dialogue to a child dialogue."""

    label: str
    target: int

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "label", _validate_text(self.label, field_name="choice label")
        )


@dataclass
class DialogueNode:
    """One addressable unit of story text plus its outgoing choices."""

    id: int
    text: str = ""
    description: str = EMPTY_DESCRIPTION
    choices: List[DialogueChoice] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise TypeError(f"text must be a string, got {type(self.text)!r}")
        self.description = _normalise_description(self.description)
        self.choices = list(self.choices)

    @property
    def has_description(self) -> bool:
        return self.description != EMPTY_DESCRIPTION

    def child_ids(self) -> Tuple[int, ...]:
        return tuple(choice.target for choice in self.choices)


class DialogueTree:
    """Own every dialogue node of a single game and guard its structure.

    The tree keeps three pieces of bookkeeping in sync:

    * ``_nodes``: the id-indexed dialogue nodes.
    * ``_parent_of``: the parent id of every non-root node.
    * ``_next_id``: the allocator for fresh ids. It only ever grows, so an id
      released by :meth:`delete_node` is never issued again.
    """

    def __init__(
        self,
        root_text: str = "",
        *,
        root_id: int = 0,
        root_description: str | None = None,
    ) -> None:
        if not isinstance(root_id, int) or root_id < 0:
            raise ValueError("root_id must be a non-negative integer")

        self._root_id = root_id
        self._nodes: Dict[int, DialogueNode] = {
            root_id: DialogueNode(
                id=root_id, text=root_text, description=root_description
            )
        }
        self._parent_of: Dict[int, int] = {}
        self._next_id = root_id + 1

    @classmethod
    def from_nodes(
        cls,
        nodes: Iterable[DialogueNode],
        *,
        root_id: int,
        next_id: int | None = None,
    ) -> "DialogueTree":
        """Rebuild a tree from stored nodes, rejecting broken structures.

        Raises:
            ValueError: If ids repeat or :meth:`validate` reports any issue.
        """

        by_id: Dict[int, DialogueNode] = {}
        for node in nodes:
            if node.id in by_id:
                raise ValueError(f"duplicate dialogue id: {node.id}")
            by_id[node.id] = node

        tree = cls.__new__(cls)
        tree._root_id = root_id
        tree._nodes = by_id
        tree._parent_of = {}
        for node in by_id.values():
            for child_id in node.child_ids():
                # Keep the first parent; validate() reports any second one.
                tree._parent_of.setdefault(child_id, node.id)

        highest = max(by_id, default=root_id)
        tree._next_id = highest + 1 if next_id is None else next_id

        issues = tree.validate()
        if issues:
            raise ValueError("invalid dialogue tree: " + "; ".join(issues))
        return tree

    @property
    def root_id(self) -> int:
        return self._root_id

    @property
    def next_id(self) -> int:
        """Return the id that the next :meth:`add_choice` call will allocate."""

        return self._next_id

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[DialogueNode]:
        for node_id in self.node_ids():
            yield self._nodes[node_id]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DialogueTree):
            return NotImplemented
        return (
            self._root_id == other._root_id
            and self._next_id == other._next_id
            and self._nodes == other._nodes
        )

    def __repr__(self) -> str:
        return f"DialogueTree(root_id={self._root_id}, nodes={len(self._nodes)})"

    def node_ids(self) -> Tuple[int, ...]:
        return tuple(sorted(self._nodes))

    def id_exists(self, node_id: int) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: int) -> DialogueNode:
        """Return the dialogue stored under ``node_id``.

        Raises:
            NodeNotFoundError: If the id is not part of the tree.
        """

        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def get_parent(self, node_id: int) -> int:
        """Return the parent id, or ``ROOT_PARENT`` for the root and unknown ids."""

        return self._parent_of.get(node_id, ROOT_PARENT)

    def ancestors(self, node_id: int) -> Tuple[int, ...]:
        """Return the ids from the parent of ``node_id`` up to the root."""

        self.get_node(node_id)
        chain: List[int] = []
        current = self.get_parent(node_id)
        while current != ROOT_PARENT and len(chain) <= len(self._nodes):
            chain.append(current)
            current = self.get_parent(current)
        return tuple(chain)

    def add_choice(
        self, parent_id: int, label: str, description: str | None = None
    ) -> int:
        """Append a new child dialogue under ``parent_id`` and return its id.

        The new dialogue starts with empty text. ``description`` falls back to
        the single-space sentinel when blank.

        Raises:
            NodeNotFoundError: If ``parent_id`` is not part of the tree.
            ValueError: If ``label`` is blank.
        """

        parent = self.get_node(parent_id)
        new_id = self._next_id
        choice = DialogueChoice(label, new_id)

        self._nodes[new_id] = DialogueNode(id=new_id, description=description)
        parent.choices.append(choice)
        self._parent_of[new_id] = parent_id
        self._next_id += 1
        return new_id

    def set_text(self, node_id: int, text: str) -> None:
        """Replace the dialogue text of ``node_id``.

        Raises:
            NodeNotFoundError: If the id is not part of the tree.
        """

        if not isinstance(text, str):
            raise TypeError(f"text must be a string, got {type(text)!r}")
        self.get_node(node_id).text = text

    def delete_node(self, node_id: int) -> bool:
        """Remove ``node_id`` together with every dialogue beneath it.

        Returns ``False`` without touching the tree when ``node_id`` is the
        root or is unknown; ``True`` once the subtree is gone and no remaining
        choice points into it.
        """

        if node_id == self._root_id or node_id not in self._nodes:
            return False

        doomed = set(self._collect_subtree(node_id))
        for victim in doomed:
            del self._nodes[victim]
            self._parent_of.pop(victim, None)

        for node in self._nodes.values():
            if any(choice.target in doomed for choice in node.choices):
                node.choices = [
                    choice for choice in node.choices if choice.target not in doomed
                ]
        return True

    def render_subtree(self, node_id: int, limit: int) -> str:
        """Return an indented outline of ``node_id`` and its descendants.

        The outline is cut after ``limit`` characters and marked with ``...``
        when anything was left out.
        """

        if not isinstance(limit, int) or limit <= 0:
            raise ValueError("limit must be a positive integer")
        self.get_node(node_id)

        lines: List[str] = []
        stack: List[Tuple[int, str | None, int]] = [(node_id, None, 0)]
        visited: set[int] = set()
        while stack:
            current_id, label, depth = stack.pop()
            if current_id in visited or current_id not in self._nodes:
                continue
            visited.add(current_id)
            node = self._nodes[current_id]

            indent = "  " * depth
            prefix = f"{label} -> " if label is not None else ""
            text = " ".join(node.text.split()) or "(empty)"
            lines.append(f"{indent}{prefix}[{current_id}] {text}")

            for choice in reversed(node.choices):
                stack.append((choice.target, choice.label, depth + 1))

        rendered = "\n".join(lines)
        if len(rendered) <= limit:
            return rendered
        return rendered[:limit].rstrip() + "..."

    def validate(self) -> Tuple[str, ...]:
        """Return a description of every structural problem in the tree."""

        issues: List[str] = []
        if self._root_id not in self._nodes:
            return (f"root dialogue {self._root_id} is missing",)

        if self._nodes and self._next_id <= max(self._nodes):
            issues.append(
                f"next id {self._next_id} would reuse an existing dialogue id"
            )

        parents: Dict[int, int] = {}
        for node in self._nodes.values():
            for choice in node.choices:
                if choice.target not in self._nodes:
                    issues.append(
                        f"dialogue {node.id} has a choice to missing dialogue "
                        f"{choice.target}"
                    )
                    continue
                if choice.target == self._root_id:
                    issues.append(f"dialogue {node.id} points back to the root")
                    continue
                previous = parents.setdefault(choice.target, node.id)
                if previous != node.id or node.child_ids().count(choice.target) > 1:
                    issues.append(f"dialogue {choice.target} has more than one parent")

        reachable = set(self._collect_subtree(self._root_id))
        unreachable = sorted(set(self._nodes) - reachable)
        if unreachable:
            formatted = ", ".join(str(node_id) for node_id in unreachable)
            issues.append(f"dialogues not reachable from the root: {formatted}")

        return tuple(dict.fromkeys(issues))

    def _collect_subtree(self, node_id: int) -> List[int]:
        collected: List[int] = []
        seen: set[int] = set()
        queue = deque([node_id])
        while queue:
            current = queue.popleft()
            if current in seen or current not in self._nodes:
                continue
            seen.add(current)
            collected.append(current)
            queue.extend(self._nodes[current].child_ids())
        return collected


__all__ = [
    "ROOT_PARENT",
    "EMPTY_DESCRIPTION",
    "DialogueChoice",
    "DialogueNode",
    "DialogueTree",
    "NodeNotFoundError",
]
