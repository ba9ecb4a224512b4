"""Immutable sign descriptors supplied by the sign dictionary."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class MovementType(Enum):
    STATIC = "static"
    LINEAR = "linear"
    ARC = "arc"
    CIRCULAR = "circular"
    ZIGZAG = "zigzag"


class MovementSpeed(Enum):
    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"


class MarkerType(Enum):
    FACIAL = "facial"
    HEAD = "head"
    BODY = "body"


@dataclass(frozen=True)
class Handshape:
    dominant: str
    non_dominant: Optional[str] = None

    @property
    def two_handed(self) -> bool:
        return bool(self.non_dominant)


@dataclass(frozen=True)
class SignLocation:
    """Normalized signing-space location (x: -1 left..1 right, y: -1 low..1 high)."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    frame: str = "neutral"  # neutral, face, chest, head, side


@dataclass(frozen=True)
class SignMovement:
    type: MovementType = MovementType.STATIC
    direction: Optional[tuple[float, float, float]] = None
    repetitions: Optional[int] = None
    speed: MovementSpeed = MovementSpeed.NORMAL


@dataclass(frozen=True)
class NonManualMarker:
    type: MarkerType
    expression: str
    intensity: float = 1.0  # 0-1


def _section(value: Any, name: str) -> dict:
    """Optional nested record; null or absent reads as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Sign {name} must be an object, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Sign:
    gloss: str
    duration_ms: float
    handshape: Handshape
    location: SignLocation = field(default_factory=SignLocation)
    movement: SignMovement = field(default_factory=SignMovement)
    non_manual_markers: tuple[NonManualMarker, ...] = ()

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Sign":
        """Build a Sign from the camelCase record shape the dictionary emits."""
        hs = d.get("handshape")
        if isinstance(hs, str):
            hs = {"dominant": hs}
        hs = _section(hs, "handshape")
        loc = _section(d.get("location"), "location")
        mov = _section(d.get("movement"), "movement")

        direction = mov.get("direction")
        if isinstance(direction, dict):
            direction = (
                float(direction.get("x", 0.0)),
                float(direction.get("y", 0.0)),
                float(direction.get("z", 0.0)),
            )
        elif direction is not None:
            direction = tuple(float(c) for c in direction)

        markers = tuple(
            NonManualMarker(
                type=MarkerType(m["type"]),
                expression=m["expression"],
                intensity=float(m.get("intensity", 1.0)),
            )
            for m in d.get("nonManualMarkers", d.get("non_manual_markers")) or ()
        )

        repetitions = mov.get("repetitions")
        return cls(
            gloss=d["gloss"],
            duration_ms=float(d.get("durationMs", d.get("duration", 1000.0))),
            handshape=Handshape(
                dominant=hs.get("dominant", "flat-hand"),
                non_dominant=hs.get("nonDominant", hs.get("non_dominant")),
            ),
            location=SignLocation(
                x=float(loc.get("x", 0.0)),
                y=float(loc.get("y", 0.0)),
                z=float(loc.get("z", 0.0)),
                frame=loc.get("frame", loc.get("reference", "neutral")),
            ),
            movement=SignMovement(
                type=MovementType(mov.get("type", "static")),
                direction=direction,
                repetitions=int(repetitions) if repetitions is not None else None,
                speed=MovementSpeed(mov.get("speed", "normal")),
            ),
            non_manual_markers=markers,
        )
