"""
Full-name lookup used to turn a human-written roster into person ids.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

logger = logging.getLogger("directory")


def full_name_key(first_name: Optional[str], last_name: Optional[str]) -> str:
    return f"{(first_name or '').strip()} {(last_name or '').strip()}".strip()


@dataclass
class DirectoryIndex:
    by_name: dict[str, str] = field(default_factory=dict)
    collisions: list[str] = field(default_factory=list)

    def resolve(self, name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        return self.by_name.get(name.strip())

    def __len__(self) -> int:
        return len(self.by_name)


def build_index(people: Iterable[Any]) -> DirectoryIndex:
    """Map ``"first last"`` to person id.

    Identical names resolve to whichever person comes last; every such
    overwrite is recorded in ``collisions`` so the caller can surface it.
    """
    index = DirectoryIndex()
    for person in people:
        key = full_name_key(person.first_name, person.last_name)
        if not key:
            continue
        previous = index.by_name.get(key)
        if previous is not None and previous != person.id:
            warning = f"Duplicate name '{key}': {previous} replaced by {person.id}"
            index.collisions.append(warning)
            logger.warning(warning)
        index.by_name[key] = person.id
    return index
