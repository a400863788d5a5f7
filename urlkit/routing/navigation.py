"""
Navigation nodes - pre-built links for menus and sitemaps.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class NavigationNode:
    """One resolved route, as produced by ``Group.navigation``."""
    group: str           # dotted group name, e.g. "frontend.en"
    route: str           # route name within the group
    full_route: str      # "frontend.en.about"
    path: str            # raw route template
    url: str             # fully built URL
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable form; ``params`` is omitted when empty."""
        data: Dict[str, Any] = {
            "group": self.group,
            "route": self.route,
            "full_route": self.full_route,
            "path": self.path,
            "url": self.url,
        }
        if self.params:
            data["params"] = dict(self.params)
        return data
