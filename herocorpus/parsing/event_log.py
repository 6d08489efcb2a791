"""
Event Log Replay Source

A ReplaySource reading decoded replays stored as JSON lines, one event per line:

    {"type": "string", "table": "EntityNames", "index": 3, "value": "npc_dota_hero_axe"}
    {"type": "entity", "tick": 120, "index": 5, "class": "CDOTA_Unit_Hero_Axe", "props": {"m_iTeamNum": 2}}
    {"type": "delete", "tick": 130, "index": 5}
    {"type": "orders", "tick": 131, "units": [5], "target": 7, "ability": 0, "position": [100.0, -20.5]}

Entity events merge their props into the entity's current state, so a log can carry full
snapshots or deltas. Useful for replays decoded by an external tool and for tests.
"""

import io
import json
from typing import Any, BinaryIO, Dict, Iterable, List, Optional, Union

from herocorpus.errors import ReplaySourceError
from herocorpus.parsing.replay_source import (
    Entity,
    EntityCallback,
    OrderCallback,
    ReplaySource,
    UnitOrder,
)


class EventLogEntity(Entity):
    """Entity state backed by a property dict."""

    def __init__(self, index: int, class_name: str, props: Optional[Dict[str, Any]] = None):
        self._index = index
        self._class_name = class_name
        self.props: Dict[str, Any] = dict(props or {})

    @property
    def index(self) -> int:
        return self._index

    @property
    def class_name(self) -> str:
        return self._class_name

    def _number(self, path: str) -> Optional[float]:
        value = self.props.get(path)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value

    def fetch_int(self, path: str) -> Optional[int]:
        value = self._number(path)
        return None if value is None else int(value)

    def fetch_uint(self, path: str) -> Optional[int]:
        value = self._number(path)
        if value is None or value < 0:
            return None
        return int(value)

    def fetch_float(self, path: str) -> Optional[float]:
        value = self._number(path)
        return None if value is None else float(value)

    def fetch_string(self, path: str) -> Optional[str]:
        value = self.props.get(path)
        return value if isinstance(value, str) else None

    def __repr__(self) -> str:
        return f"EventLogEntity(index={self._index}, class_name={self._class_name!r})"


class EventLogSource(ReplaySource):
    """
    Replay source over a JSON-lines event log.

    Example:
        >>> with open('match.jsonl', 'rb') as stream:
        ...     source = EventLogSource(stream)
        ...     source.on_entity(print)
        ...     source.start()
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self._tick = 0
        self._stopped = False
        self._entities: Dict[int, EventLogEntity] = {}
        self._strings: Dict[str, Dict[int, str]] = {}
        self._entity_callbacks: List[EntityCallback] = []
        self._order_callbacks: List[OrderCallback] = []

    @classmethod
    def from_events(cls, events: Iterable[Dict[str, Any]]) -> 'EventLogSource':
        """Build a source over in-memory events."""
        return cls(io.BytesIO(encode_events(events)))

    @property
    def tick(self) -> int:
        return self._tick

    def on_entity(self, callback: EntityCallback) -> None:
        self._entity_callbacks.append(callback)

    def on_unit_orders(self, callback: OrderCallback) -> None:
        self._order_callbacks.append(callback)

    def entity(self, index: int) -> Optional[Entity]:
        return self._entities.get(index)

    def lookup_string(self, table: str, index: int) -> Optional[str]:
        return self._strings.get(table, {}).get(index)

    def stop(self) -> None:
        self._stopped = True

    def start(self) -> None:
        """
        Play the log from the stream's current position.

        Raises:
            ReplaySourceError: If a line is not valid JSON or not a known event
        """
        for line_number, raw in enumerate(self.stream, 1):
            if self._stopped:
                break
            if not raw.strip():
                continue
            try:
                event = json.loads(raw)
                subject = self._apply(event)
            except (ValueError, KeyError, TypeError) as e:
                raise ReplaySourceError(f"Invalid event on line {line_number}: {e}") from e

            # Callbacks run outside the decoding guard so their errors propagate unchanged
            if isinstance(subject, UnitOrder):
                for callback in self._order_callbacks:
                    callback(subject)
            elif subject is not None:
                for callback in self._entity_callbacks:
                    callback(subject)

    def _apply(self, event: Dict[str, Any]) -> Union[EventLogEntity, UnitOrder, None]:
        """Update decoder state from one event; returns the updated entity or the order, if any."""
        if 'tick' in event:
            self._tick = int(event['tick'])

        event_type = event['type']

        if event_type == 'string':
            self._strings.setdefault(event['table'], {})[int(event['index'])] = event['value']
            return None

        if event_type == 'entity':
            index = int(event['index'])
            entity = self._entities.get(index)
            if entity is None or ('class' in event and event['class'] != entity.class_name):
                entity = EventLogEntity(index, event['class'])
                self._entities[index] = entity
            entity.props.update(event.get('props', {}))
            return entity

        if event_type == 'delete':
            self._entities.pop(int(event['index']), None)
            return None

        if event_type == 'orders':
            position = event.get('position')
            return UnitOrder(
                units=tuple(int(unit) for unit in event['units']),
                target_index=int(event.get('target') or 0),
                ability_index=int(event.get('ability') or 0),
                position=(float(position[0]), float(position[1])) if position else None
            )

        raise ValueError(f"unknown event type '{event_type}'")


def encode_events(events: Iterable[Dict[str, Any]]) -> bytes:
    """Serialize events to JSON-lines bytes."""
    return ''.join(json.dumps(event) + '\n' for event in events).encode('utf-8')
