""" Mutable state of one type-graph traversal """

from dataclasses import dataclass, field
from typing import Dict, List, Set


@dataclass
class TraversalState:
    """
    Visited classes, emitted definitions and direct dependencies, keyed by
    qualified class name. Owned by a single generator instance.
    """
    visited: Set[str] = field(default_factory=set)
    definitions: Dict[str, str] = field(default_factory=dict)
    dependencies: Dict[str, List[str]] = field(default_factory=dict)

    def mark_visited(self, class_name: str) -> bool:
        """Marks a class as visited. Returns False if it already was."""
        if class_name in self.visited:
            return False
        self.visited.add(class_name)
        return True

    def record(self, class_name: str, definition: str, dependencies: List[str]) -> None:
        self.definitions[class_name] = definition
        self.dependencies[class_name] = [d for d in dependencies if d != class_name]
