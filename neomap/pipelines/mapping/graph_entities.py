"""
Graph Entity Model
Normalized nodes, relationships and the render-ready map state
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Tuple

from ...config.settings import NodeSize
from ...utils.serialization import to_jsonable

Identity = Hashable
LinkKey = Tuple[Identity, Identity]
Position = Tuple[float, float]


@dataclass
class NodeEntity:
    id: Identity
    labels: List[str]
    first_label: Optional[str]
    size: NodeSize
    properties: Dict[str, Any] = field(default_factory=dict)
    pos: Optional[Position] = None
    color: Optional[str] = None


@dataclass
class RelationshipEntity:
    id: Identity
    source: Identity
    target: Identity
    type: str
    width: Any
    color: Any
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PositionedRelationship(RelationshipEntity):
    """A relationship whose endpoints both resolved a position."""

    start: Optional[Position] = None
    end: Optional[Position] = None


@dataclass
class GraphAccumulator:
    """
    Mutable accumulator threaded through one ingestion pass.

    ``labels`` is used as an insertion-ordered set; the position of a label
    in it is the label's rank for palette coloring.
    """

    nodes: Dict[Identity, NodeEntity] = field(default_factory=dict)
    links: Dict[LinkKey, List[RelationshipEntity]] = field(default_factory=dict)
    labels: Dict[str, None] = field(default_factory=dict)

    def add_label(self, label: str) -> None:
        self.labels.setdefault(label, None)

    def put_node(self, node: NodeEntity) -> None:
        self.nodes[node.id] = node

    def add_link(self, link: RelationshipEntity) -> bool:
        """Append ``link`` to its (source, target) group unless its id is already there."""
        group = self.links.setdefault((link.source, link.target), [])
        if any(existing.id == link.id for existing in group):
            return False
        group.append(link)
        return True

    def label_list(self) -> List[str]:
        return list(self.labels)


@dataclass(frozen=True)
class PixelDimensions:
    width: Optional[float] = None
    height: Optional[float] = None


@dataclass(frozen=True)
class ViewportFit:
    """Raw fit result; ``None`` stands for a non-finite value."""

    center_latitude: Optional[float]
    center_longitude: Optional[float]
    zoom: Optional[int]


@dataclass(frozen=True)
class VisualizationState:
    nodes: Tuple[NodeEntity, ...] = ()
    links: Tuple[PositionedRelationship, ...] = ()
    center_latitude: float = 0.0
    center_longitude: float = 0.0
    zoom: int = 0

    @classmethod
    def empty(cls) -> "VisualizationState":
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node_to_dict(n) for n in self.nodes],
            "links": [link_to_dict(l) for l in self.links],
            "centerLatitude": self.center_latitude,
            "centerLongitude": self.center_longitude,
            "zoom": self.zoom,
        }


def node_to_dict(node: NodeEntity) -> Dict[str, Any]:
    return {
        "id": to_jsonable(node.id),
        "labels": list(node.labels),
        "firstLabel": node.first_label,
        "size": to_jsonable(node.size),
        "properties": to_jsonable(node.properties),
        "pos": list(node.pos) if node.pos is not None else None,
        "color": node.color,
    }


def link_to_dict(link: RelationshipEntity) -> Dict[str, Any]:
    payload = {
        "id": to_jsonable(link.id),
        "source": to_jsonable(link.source),
        "target": to_jsonable(link.target),
        "type": link.type,
        "width": to_jsonable(link.width),
        "color": to_jsonable(link.color),
        "properties": to_jsonable(link.properties),
    }
    if isinstance(link, PositionedRelationship):
        payload["start"] = list(link.start) if link.start is not None else None
        payload["end"] = list(link.end) if link.end is not None else None
    return payload
