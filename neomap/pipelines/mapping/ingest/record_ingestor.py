"""
Record Ingestor
Walks graph query result rows and extracts normalized nodes and relationships

Fields are classified by an ordered table of (predicate, handler) pairs.
The first matching predicate wins; fields that match nothing are skipped.
Typed entities are accepted both as driver graph objects and in their JSON
wire form (``identity``/``labels``/``properties``, ``segments`` for paths).
"""
import logging
import warnings
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from ....config.settings import MapChartSettings
from ....utils.serialization import is_spatial_point
from ..graph_entities import GraphAccumulator, Identity, NodeEntity, RelationshipEntity

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]


def _present(value: Mapping, *keys: str) -> bool:
    return all(value.get(k) is not None for k in keys)


def _is_key(value: Any) -> bool:
    """True when ``value`` can key the node and link maps."""
    if value is None:
        return False
    try:
        hash(value)
    except TypeError:
        return False
    return True


def normalize_identity(value: Any) -> Any:
    """Collapse a ``{"low", "high"}`` 64-bit integer into a plain int."""
    if isinstance(value, Mapping) and "low" in value:
        try:
            low = int(value["low"])
            high = int(value.get("high") or 0)
        except (TypeError, ValueError):
            return value
        return (high << 32) + (low & 0xFFFFFFFF)
    return value


def entity_identity(entity: Any) -> Optional[Identity]:
    if isinstance(entity, Mapping):
        return normalize_identity(entity.get("identity"))
    # Numeric ids are deprecated in the 5.x driver but remain the graph-native identity.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DeprecationWarning)
        native = getattr(entity, "id", None)
    if native is None:
        native = getattr(entity, "element_id", None)
    return normalize_identity(native)


def entity_properties(entity: Any) -> dict:
    if isinstance(entity, Mapping):
        properties = entity.get("properties")
        return dict(properties) if isinstance(properties, Mapping) else {}
    return dict(entity.items())


def entity_labels(entity: Any) -> List[str]:
    labels = entity.get("labels") if isinstance(entity, Mapping) else entity.labels
    if isinstance(labels, str):
        return [labels]
    if isinstance(labels, (list, tuple)):
        return [str(l) for l in labels]
    if isinstance(labels, (set, frozenset)):
        # driver returns an unordered frozenset
        return sorted(str(l) for l in labels)
    return []


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and not is_spatial_point(value)


def is_manual_node(value: Any) -> bool:
    return isinstance(value, Mapping) and _present(value, "label", "id") and _is_key(value["id"])


def is_manual_relationship(value: Any) -> bool:
    return (
        isinstance(value, Mapping)
        and _present(value, "type", "id", "start", "end")
        and all(_is_key(value[k]) for k in ("id", "start", "end"))
    )


def is_typed_node(value: Any) -> bool:
    if isinstance(value, Mapping):
        return "labels" in value and _is_key(entity_identity(value))
    return hasattr(value, "labels") and _is_key(entity_identity(value))


def is_typed_relationship(value: Any) -> bool:
    if isinstance(value, Mapping):
        return _present(value, "identity", "start", "end", "type") and all(
            _is_key(normalize_identity(value[k])) for k in ("identity", "start", "end")
        )
    if not all(hasattr(value, a) for a in ("start_node", "end_node", "type")):
        return False
    return _is_key(entity_identity(value))


def is_typed_path(value: Any) -> bool:
    if isinstance(value, Mapping):
        return isinstance(value.get("segments"), (list, tuple))
    return hasattr(value, "nodes") and hasattr(value, "relationships")


def path_segments(path: Any) -> Iterable[Tuple[Any, Any, Any]]:
    if isinstance(path, Mapping):
        for segment in path["segments"]:
            if not isinstance(segment, Mapping):
                logger.debug(f"Skipping malformed path segment of type {type(segment).__name__}")
                continue
            yield segment.get("start"), segment.get("relationship"), segment.get("end")
        return
    nodes = list(path.nodes)
    for i, relationship in enumerate(path.relationships):
        yield nodes[i], relationship, nodes[i + 1]


def record_fields(record: Any) -> List[Any]:
    """Return the field values of one result row."""
    if record is None:
        return []
    values = getattr(record, "values", None)
    if callable(values):
        return list(values())
    fields = getattr(record, "_fields", None)
    if isinstance(fields, (list, tuple)):
        return list(fields)
    if isinstance(record, (list, tuple)):
        return list(record)
    return [record]


class RecordIngestor:
    """
    Extracts graph entities from heterogeneous result rows.

    Nodes are keyed by identity (later occurrences overwrite earlier ones);
    relationships are grouped by ``(source, target)`` with first-seen-by-id
    winning inside each group.
    """

    def __init__(self, settings: Optional[MapChartSettings] = None):
        self.settings = settings or MapChartSettings()
        self._dispatch: List[Tuple[str, Predicate, Callable[[Any, GraphAccumulator], None]]] = [
            ("array", is_array, self._ingest_array),
            ("manual_node", is_manual_node, self._ingest_manual_node),
            ("manual_relationship", is_manual_relationship, self._ingest_manual_relationship),
            ("node", is_typed_node, self._ingest_node),
            ("relationship", is_typed_relationship, self._ingest_relationship),
            ("path", is_typed_path, self._ingest_path),
        ]

    def ingest(self, records: Iterable[Any], accumulator: Optional[GraphAccumulator] = None) -> GraphAccumulator:
        acc = accumulator if accumulator is not None else GraphAccumulator()
        row_count = 0
        for record in records or []:
            row_count += 1
            for value in record_fields(record):
                self.ingest_field(value, acc)

        link_count = sum(len(group) for group in acc.links.values())
        logger.info(
            f"📥 Ingested {row_count} rows: {len(acc.nodes)} nodes, "
            f"{link_count} relationships, {len(acc.labels)} labels"
        )
        return acc

    def ingest_field(self, value: Any, acc: GraphAccumulator) -> None:
        if value is None:
            return
        for name, predicate, handler in self._dispatch:
            if predicate(value):
                handler(value, acc)
                return
        logger.debug(f"Skipping unrecognized field of type {type(value).__name__}")

    def _ingest_array(self, value: Any, acc: GraphAccumulator) -> None:
        for item in value:
            self.ingest_field(item, acc)

    def _ingest_manual_node(self, value: Mapping, acc: GraphAccumulator) -> None:
        label = str(value["label"])
        acc.add_label(label)
        acc.put_node(NodeEntity(
            id=value["id"],
            labels=[label],
            first_label=label,
            size=self.settings.default_node_size,
            properties=dict(value),
        ))

    def _ingest_manual_relationship(self, value: Mapping, acc: GraphAccumulator) -> None:
        acc.add_link(self._relationship(
            identity=value["id"],
            source=value["start"],
            target=value["end"],
            rel_type=value["type"],
            properties=dict(value),
        ))

    def _ingest_node(self, value: Any, acc: GraphAccumulator) -> None:
        labels = entity_labels(value)
        for label in labels:
            acc.add_label(label)
        acc.put_node(NodeEntity(
            id=entity_identity(value),
            labels=labels,
            first_label=labels[0] if labels else None,
            size=self.settings.default_node_size,
            properties=entity_properties(value),
        ))

    def _ingest_relationship(self, value: Any, acc: GraphAccumulator) -> None:
        if isinstance(value, Mapping):
            source = normalize_identity(value["start"])
            target = normalize_identity(value["end"])
        else:
            source = entity_identity(value.start_node)
            target = entity_identity(value.end_node)
        acc.add_link(self._relationship(
            identity=entity_identity(value),
            source=source,
            target=target,
            rel_type=value["type"] if isinstance(value, Mapping) else value.type,
            properties=entity_properties(value),
        ))

    def _ingest_path(self, value: Any, acc: GraphAccumulator) -> None:
        for start, relationship, end in path_segments(value):
            self.ingest_field(start, acc)
            self.ingest_field(relationship, acc)
            self.ingest_field(end, acc)

    def _relationship(self, identity, source, target, rel_type, properties: dict) -> RelationshipEntity:
        return RelationshipEntity(
            id=identity,
            source=source,
            target=target,
            type=str(rel_type),
            width=properties.get(self.settings.rel_width_prop) or self.settings.default_rel_width,
            color=properties.get(self.settings.rel_color_prop) or self.settings.default_rel_color,
            properties=properties,
        )
