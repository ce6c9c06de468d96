"""
Entity Enricher
Assigns colors and geographic positions to ingested nodes and resolves
relationship endpoints to coordinates
"""
import logging
import math
from dataclasses import replace
from numbers import Real
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ....config.color_schemes import get_color_scheme
from ....config.settings import MapChartSettings
from ....services.styling.style_rules import StyleRuleEvaluator, evaluate_rules_on_node, parse_rules
from ....utils.serialization import is_spatial_point, point_component
from ..graph_entities import GraphAccumulator, NodeEntity, Position, PositionedRelationship

logger = logging.getLogger(__name__)

MARKER_COLOR = "marker color"


def as_coordinate(value: Any) -> Optional[float]:
    """Parse a coordinate; returns None for anything that is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _pair(lat: Any, lon: Any) -> Optional[Position]:
    lat_value = as_coordinate(lat)
    lon_value = as_coordinate(lon)
    if lat_value is None or lon_value is None:
        return None
    return (lat_value, lon_value)


def resolve_position(properties: Dict[str, Any]) -> Optional[Position]:
    """
    Resolve a node's position from its properties.

    Tried in order: latitude/longitude, lat/long, then spatial point
    properties (position is ``[y, x]``). When several points parse, the last
    one in property order wins.
    """
    if properties.get("latitude") is not None and properties.get("longitude") is not None:
        pos = _pair(properties["latitude"], properties["longitude"])
        if pos is not None:
            return pos
    if properties.get("lat") is not None and properties.get("long") is not None:
        pos = _pair(properties["lat"], properties["long"])
        if pos is not None:
            return pos
    pos = None
    for value in properties.values():
        if value is None or isinstance(value, str) or not is_spatial_point(value):
            continue
        pos = _pair(point_component(value, "y"), point_component(value, "x")) or pos
    return pos


class EntityEnricher:
    """
    Turns an ingestion accumulator into positioned, colored node and link lists.
    """

    def __init__(
        self,
        settings: Optional[MapChartSettings] = None,
        style_evaluator: Optional[StyleRuleEvaluator] = None,
    ):
        self.settings = settings or MapChartSettings()
        self.style_evaluator = style_evaluator or evaluate_rules_on_node

    def enrich(
        self,
        acc: GraphAccumulator,
        style_rules: Optional[Sequence[Any]] = None,
        color_scheme: Optional[List[str]] = None,
    ) -> Tuple[List[NodeEntity], List[PositionedRelationship]]:
        # validated once per pass; the evaluator receives StyleRule models
        rules = parse_rules(style_rules if style_rules is not None else self.settings.style_rules)
        palette = color_scheme or get_color_scheme(self.settings.node_color_scheme)
        label_rank = {label: i for i, label in enumerate(acc.label_list())}

        enriched: Dict[Any, NodeEntity] = {}
        for node_id, node in acc.nodes.items():
            enriched[node_id] = replace(
                node,
                pos=resolve_position(node.properties),
                color=self._node_color(node, palette, label_rank, rules),
            )

        links: List[PositionedRelationship] = []
        dropped = 0
        for group in acc.links.values():
            for link in group:
                source = enriched.get(link.source)
                target = enriched.get(link.target)
                if source is None or target is None or source.pos is None or target.pos is None:
                    dropped += 1
                    continue
                links.append(PositionedRelationship(
                    id=link.id,
                    source=link.source,
                    target=link.target,
                    type=link.type,
                    width=link.width,
                    color=link.color,
                    properties=link.properties,
                    start=source.pos,
                    end=target.pos,
                ))

        nodes = list(enriched.values())
        unplaced = sum(1 for n in nodes if n.pos is None)
        if unplaced or dropped:
            logger.info(f"📍 {unplaced} nodes without a position, {dropped} relationships not drawable")
        return nodes, links

    def _node_color(
        self,
        node: NodeEntity,
        palette: List[str],
        label_rank: Dict[str, int],
        rules: List[Any],
    ) -> str:
        color = node.properties.get(self.settings.node_color_prop)
        if not color and node.first_label in label_rank and palette:
            color = palette[label_rank[node.first_label] % len(palette)]
        color = self.style_evaluator(node, MARKER_COLOR, color, rules)
        return color if color else self.settings.default_node_color
