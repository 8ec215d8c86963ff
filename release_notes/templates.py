"""
In-memory store for named release notes templates.
"""

from typing import Dict, List, Optional


class TemplateStore:
    """
    Named template strings kept for the lifetime of the owning process.

    Templates are opaque to the generator; the store only keeps them by name.
    """

    def __init__(self) -> None:
        self._templates: Dict[str, str] = {}

    def set(self, name: str, template: str) -> None:
        """Store ``template`` under ``name``, replacing any previous value."""
        self._templates[name] = template

    def get(self, name: str) -> Optional[str]:
        return self._templates.get(name)

    def names(self) -> List[str]:
        return list(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)
