"""Tests for sign queue playback."""

import pytest

from signpose.animation.pose_blender import PoseBlender
from signpose.animation.sign_pose import sign_to_pose
from signpose.animation.sign_sequencer import SignSequencer
from signpose.core.events import EventBus, EventType
from signpose.core.pose import poses_close, rest_pose
from signpose.core.sign import Handshape, Sign, SignLocation


def make_sign(gloss, duration_ms=500):
    return Sign(gloss=gloss, duration_ms=duration_ms, handshape=Handshape("fist"),
                location=SignLocation(0.1, 0.2, 0.0))


@pytest.fixture
def recorder():
    bus = EventBus()
    events = []
    for event_type in EventType:
        bus.subscribe(event_type, lambda _t=event_type, **kw: events.append((_t, kw)))
    return bus, events


def _names(events):
    return [(t.name, kw["sign"].gloss if "sign" in kw else None) for t, kw in events]


def test_queue_starts_immediately(recorder):
    bus, events = recorder
    seq = SignSequencer(event_bus=bus)
    seq.queue_signs([make_sign("HELLO"), make_sign("WORLD")])
    assert seq.current_sign.gloss == "HELLO"
    assert seq.queue_length == 1
    assert seq.is_animating
    assert _names(events) == [("SIGN_STARTED", "HELLO")]


def test_progress_tracks_elapsed():
    seq = SignSequencer()
    seq.queue_signs([make_sign("HELLO", 1000)])
    seq.tick(0.25)
    assert seq.progress == pytest.approx(0.25)
    assert poses_close(seq.blender.target_pose(), sign_to_pose(seq.current_sign, 0.25))


def test_full_playback_events(recorder):
    bus, events = recorder
    seq = SignSequencer(event_bus=bus)
    seq.queue_signs([make_sign("A", 100), make_sign("B", 100)])
    for _ in range(15):
        seq.tick(0.02)
    assert _names(events) == [
        ("SIGN_STARTED", "A"),
        ("SIGN_COMPLETED", "A"),
        ("SIGN_STARTED", "B"),
        ("SIGN_COMPLETED", "B"),
        ("QUEUE_EMPTY", None),
    ]
    assert seq.current_sign is None
    assert seq.progress == 0.0
    assert poses_close(seq.blender.target_pose(), rest_pose())


def test_long_tick_finishes_several_signs(recorder):
    bus, events = recorder
    seq = SignSequencer(event_bus=bus)
    seq.queue_signs([make_sign("A", 100), make_sign("B", 100), make_sign("C", 1000)])
    seq.tick(0.25)
    assert seq.current_sign.gloss == "C"
    assert seq.progress == pytest.approx(0.05)
    assert [n for n, _ in _names(events)].count("SIGN_COMPLETED") == 2


def test_zero_duration_sign_completes_on_next_tick():
    seq = SignSequencer()
    seq.queue_signs([make_sign("FLASH", 0)])
    assert seq.progress == 1.0
    seq.tick(0.0)
    assert seq.current_sign is None


def test_pause_holds_progress(recorder):
    bus, events = recorder
    seq = SignSequencer(event_bus=bus)
    seq.queue_signs([make_sign("HELLO", 1000)])
    seq.tick(0.1)
    seq.pause()
    seq.pause()
    assert not seq.is_animating
    seq.tick(0.5)
    assert seq.progress == pytest.approx(0.1)
    seq.resume()
    seq.tick(0.1)
    assert seq.progress == pytest.approx(0.2)
    names = [n for n, _ in _names(events)]
    assert names.count("PLAYBACK_PAUSED") == 1
    assert names.count("PLAYBACK_RESUMED") == 1


def test_paused_blender_keeps_settling():
    seq = SignSequencer()
    seq.queue_signs([make_sign("HELLO", 1000)])
    seq.pause()
    first = seq.tick(1 / 60)
    second = seq.tick(1 / 60)
    assert not poses_close(first, second)


def test_speed_scales_progress():
    seq = SignSequencer()
    seq.set_speed(2.0)
    seq.queue_signs([make_sign("HELLO", 1000)])
    seq.tick(0.1)
    assert seq.progress == pytest.approx(0.2)


@pytest.mark.parametrize("speed", [0.0, -1.0])
def test_bad_speed_rejected(speed):
    with pytest.raises(ValueError):
        SignSequencer().set_speed(speed)


def test_clear_returns_to_rest(recorder):
    bus, events = recorder
    seq = SignSequencer(event_bus=bus)
    seq.queue_signs([make_sign("A"), make_sign("B"), make_sign("C")])
    seq.tick(0.1)
    seq.clear()
    assert seq.current_sign is None
    assert seq.queue_length == 0
    assert poses_close(seq.blender.target_pose(), rest_pose())
    assert events[-1] == (EventType.QUEUE_CLEARED, {"dropped": 3})


def test_queue_while_playing_appends():
    seq = SignSequencer()
    seq.queue_signs([make_sign("A")])
    seq.queue_signs([make_sign("B")])
    assert seq.current_sign.gloss == "A"
    assert seq.queue_length == 1


def test_queue_empty_list_stays_idle():
    seq = SignSequencer()
    seq.queue_signs([])
    assert seq.current_sign is None
    assert not seq.is_animating


def test_bad_dt_rejected():
    seq = SignSequencer()
    seq.queue_signs([make_sign("A", 1000)])
    with pytest.raises(ValueError):
        seq.tick(float("nan"))
    assert seq.progress == 0.0


def test_uses_given_blender():
    blender = PoseBlender()
    seq = SignSequencer(blender)
    assert seq.blender is blender
