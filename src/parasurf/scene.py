"""Per-frame update loop for visualised surfaces.

The host (see :mod:`parasurf.viewer`) turns its window events into the
small event types below, pushes them onto an :class:`EventQueue` and calls
:meth:`Session.update` once per frame.  The session applies the frame's
events in arrival order and then refreshes every entity whose
:class:`~parasurf.mero.Mero` changed, so a frame with several clicks still
rebuilds each mesh only once.

An entity's mesh is either *clean* (built from the current Mero version)
or *dirty*.  Refreshing builds the replacement mesh completely before
publishing it, so a consumer always sees either the old or the new mesh.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from parasurf.geom import Vec2, Vec3, to_vec2
from parasurf.mero import ENCODINGS, Mero, mero_uv
from parasurf.mesh import Mesh, Topology, as_topology, assemble, with_uvs
from parasurf.sampler import Surface


class Button(Enum):
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"


@dataclass(frozen=True)
class PointerRelease:
    """A mouse button released at ``position`` (domain coordinates)."""

    button: Button
    position: Vec2


@dataclass(frozen=True)
class PointerDrag:
    dx: float
    dy: float


@dataclass(frozen=True)
class KeyPress:
    key: str


Event = Union[PointerRelease, PointerDrag, KeyPress]


class EventQueue:
    """FIFO of input events, drained once per frame."""

    def __init__(self):
        self._events = deque()

    def __len__(self):
        return len(self._events)

    def push(self, event: Event) -> None:
        self._events.append(event)

    def extend(self, events: Iterable[Event]) -> None:
        self._events.extend(events)

    def drain(self) -> List[Event]:
        events = list(self._events)
        self._events.clear()
        return events


def cursor_to_domain(nx: float, ny: float, start: Sequence[float],
                     end: Sequence[float]) -> Vec2:
    """Map a normalised cursor position (``0..1`` on each window axis) into
    the parameter rectangle ``[start, end]``."""

    s = to_vec2(start)
    e = to_vec2(end)
    return (s[0] + nx * (e[0] - s[0]), s[1] + ny * (e[1] - s[1]))


@dataclass
class OrbitCamera:
    """Camera orbiting ``target`` with z up; angles in degrees."""

    azimuth: float = 35.0
    elevation: float = 25.0
    distance: float = 4.0
    target: Vec3 = (0.0, 0.0, 0.0)
    sensitivity: float = 0.5

    def rotate(self, dx: float, dy: float) -> None:
        self.azimuth = (self.azimuth - dx * self.sensitivity) % 360.0
        self.elevation = max(-89.0, min(89.0, self.elevation - dy * self.sensitivity))

    def zoom(self, steps: float) -> None:
        self.distance = max(0.5, self.distance * (0.9 ** steps))

    def eye(self) -> Vec3:
        theta = math.radians(self.azimuth)
        phi = math.radians(self.elevation)
        tx, ty, tz = self.target
        return (tx + self.distance * math.cos(phi) * math.cos(theta),
                ty + self.distance * math.cos(phi) * math.sin(theta),
                tz + self.distance * math.sin(phi))


class MeroEntity:
    """One visualised surface: its sampled Surface, optional Mero and the
    currently published Mesh."""

    def __init__(self, surface: Surface, mero: Optional[Mero] = None, *,
                 topology: Union[Topology, str] = Topology.TRIANGLES,
                 encoding: str = "modulus",
                 name: str = "surface"):
        if encoding not in ENCODINGS:
            raise ValueError(f"unknown uv encoding {encoding!r}")
        self.name = name
        self.surface = surface
        self.mero = mero
        self.topology = as_topology(topology)
        self.encoding = encoding
        self._mesh: Optional[Mesh] = None
        self._built_version: Optional[int] = None
        self.refresh()

    def __repr__(self):
        state = "dirty" if self.dirty else "clean"
        return f"MeroEntity({self.name!r}, {self.topology.value}, {state})"

    @property
    def mesh(self) -> Optional[Mesh]:
        return self._mesh

    @property
    def dirty(self) -> bool:
        if self._mesh is None:
            return True
        if self.mero is None:
            return False
        return self._built_version != self.mero.version

    def add_zero(self, p) -> None:
        if self.mero is None:
            raise ValueError(f"entity {self.name!r} has no Mero")
        self.mero.add_zero(p)

    def add_pole(self, p) -> None:
        if self.mero is None:
            raise ValueError(f"entity {self.name!r} has no Mero")
        self.mero.add_pole(p)

    def refresh(self) -> bool:
        """Rebuild the mesh if it is stale; return ``True`` if rebuilt.

        Only texture coordinates depend on the Mero, so after the first
        build the position, normal and index buffers are reused.
        """

        if not self.dirty:
            return False
        version = self.mero.version if self.mero is not None else None
        uv_fn = mero_uv(self.mero, self.encoding) if self.mero is not None else None
        if self._mesh is None:
            mesh = assemble(self.surface, self.topology, uv_fn)
        else:
            mesh = with_uvs(self._mesh, self.surface, uv_fn)
        self._mesh = mesh
        self._built_version = version
        return True


@dataclass
class Session:
    """All entities of a running visualisation plus camera and input state."""

    entities: List[MeroEntity]
    camera: OrbitCamera = field(default_factory=OrbitCamera)
    active: int = 0
    running: bool = True
    queue: EventQueue = field(default_factory=EventQueue)

    @property
    def active_entity(self) -> Optional[MeroEntity]:
        if 0 <= self.active < len(self.entities):
            return self.entities[self.active]
        return None

    def handle(self, event: Event) -> None:
        """Apply a single input event."""

        if isinstance(event, PointerRelease):
            target = self.active_entity
            if target is None or target.mero is None:
                return
            if event.button is Button.LEFT:
                target.add_zero(event.position)
            elif event.button is Button.RIGHT:
                target.add_pole(event.position)
        elif isinstance(event, PointerDrag):
            self.camera.rotate(event.dx, event.dy)
        elif isinstance(event, KeyPress):
            if event.key.lower() == "escape":
                self.running = False
        else:
            raise TypeError(f"unsupported event {event!r}")

    def update(self, events: Optional[Iterable[Event]] = None) -> List[MeroEntity]:
        """Run one frame.

        Applies ``events`` (or whatever is queued) in order, then refreshes
        each dirty entity once.  Returns the entities that were rebuilt.
        """

        if events is None:
            events = self.queue.drain()
        for event in events:
            self.handle(event)
        return [entity for entity in self.entities if entity.refresh()]


__all__ = [
    "Button",
    "PointerRelease",
    "PointerDrag",
    "KeyPress",
    "Event",
    "EventQueue",
    "cursor_to_domain",
    "OrbitCamera",
    "MeroEntity",
    "Session",
]
