"""Tests for sign descriptors and dictionary-record parsing."""

import dataclasses

import pytest

from signpose.core.sign import (
    Handshape, MarkerType, MovementSpeed, MovementType, Sign,
)


RECORD = {
    "gloss": "HELLO",
    "duration": 800,
    "handshape": {"dominant": "flat-hand", "nonDominant": "fist"},
    "location": {"x": 0.3, "y": 0.4, "z": 0.1, "reference": "head"},
    "movement": {
        "type": "arc",
        "direction": {"x": 1, "y": 0, "z": 0.5},
        "repetitions": 2,
        "speed": "fast",
    },
    "nonManualMarkers": [
        {"type": "facial", "expression": "raised-eyebrows", "intensity": 0.7},
        {"type": "head", "expression": "nod"},
    ],
}


def test_from_dict_full_record():
    sign = Sign.from_dict(RECORD)
    assert sign.gloss == "HELLO"
    assert sign.duration_ms == 800.0
    assert sign.handshape == Handshape("flat-hand", "fist")
    assert sign.handshape.two_handed
    assert sign.location.frame == "head"
    assert sign.location.x == pytest.approx(0.3)
    assert sign.movement.type is MovementType.ARC
    assert sign.movement.direction == (1.0, 0.0, 0.5)
    assert sign.movement.repetitions == 2
    assert sign.movement.speed is MovementSpeed.FAST
    assert len(sign.non_manual_markers) == 2
    assert sign.non_manual_markers[0].type is MarkerType.FACIAL
    assert sign.non_manual_markers[1].intensity == 1.0


def test_from_dict_minimal_record():
    sign = Sign.from_dict({"gloss": "YES", "durationMs": 500, "handshape": "s-hand"})
    assert sign.duration_ms == 500.0
    assert sign.handshape.dominant == "s-hand"
    assert not sign.handshape.two_handed
    assert sign.movement.type is MovementType.STATIC
    assert sign.movement.direction is None
    assert sign.non_manual_markers == ()


def test_from_dict_direction_sequence():
    sign = Sign.from_dict({"gloss": "GO", "movement": {"type": "linear", "direction": [0, 1, 0]}})
    assert sign.movement.direction == (0.0, 1.0, 0.0)


def test_from_dict_bad_movement_type():
    with pytest.raises(ValueError):
        Sign.from_dict({"gloss": "X", "movement": {"type": "teleport"}})


def test_sign_is_immutable():
    sign = Sign.from_dict(RECORD)
    with pytest.raises(dataclasses.FrozenInstanceError):
        sign.gloss = "BYE"


def test_from_dict_null_sections_read_as_empty():
    sign = Sign.from_dict({
        "gloss": "HI", "handshape": None, "location": None,
        "movement": None, "nonManualMarkers": None,
    })
    assert sign.handshape.dominant == "flat-hand"
    assert sign.location.x == 0.0
    assert sign.movement.type is MovementType.STATIC
    assert sign.non_manual_markers == ()


@pytest.mark.parametrize("key, value", [("handshape", 3), ("location", [0, 1, 0]), ("movement", "arc")])
def test_from_dict_non_object_section_rejected(key, value):
    with pytest.raises(ValueError, match=key):
        Sign.from_dict({"gloss": "HI", key: value})
