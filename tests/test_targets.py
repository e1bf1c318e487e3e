import random

import pytest
from targets import Target, TargetField


def make_field(**kw):
    kw.setdefault("rng", random.Random(1234))
    return TargetField(400, 300, **kw)


def test_target_collision():
    t = Target(100, 100, size=40, bounds=(200, 200))
    # Aim inside radius
    assert t.check_collision((100, 100)) is True
    # Aim at edge
    assert t.check_collision((100 + t.radius, 100)) is True
    # Aim outside
    assert t.check_collision((100 + t.radius + 1, 100)) is False


def test_target_bounce_left_right():
    # Start near left edge, moving left, should bounce to the right
    t = Target(14, 100, size=24, vx=-5.0, vy=0.0, bounds=(200, 200))
    t.update()
    assert t.x == t.radius  # clamped
    assert t.vx > 0  # bounced

    # Move to right edge and bounce
    t.x = 200 - 14
    t.vx = 7.0
    t.update()
    assert t.x == 200 - t.radius
    assert t.vx < 0


def test_target_bounce_top_bottom_keeps_other_axis():
    t = Target(100, 190, size=20, vx=1.5, vy=4.0, bounds=(200, 200))
    t.update()
    assert t.y == 190
    assert t.vy == -4.0
    assert t.vx == 1.5


def test_spawn_respects_interval():
    field = make_field(spawn_interval_ms=2000)
    assert field.spawn(0) is not None
    assert field.spawn(1000) is None
    assert len(field) == 1
    assert field.spawn(2000) is not None
    assert len(field) == 2


def test_spawn_parameters_within_ranges():
    field = make_field(base_size=40, base_speed=2, spawn_interval_ms=0)
    for i in range(200):
        field.spawn(i)
    for t in field.targets:
        assert 35 <= t.size <= 45
        assert t.size <= t.x <= 400 - t.size
        assert t.size <= t.y <= 300 - t.size
        assert abs(t.vx) <= 2 and abs(t.vy) <= 2
        assert 5000 <= t.life_ms <= 8000
        assert 5000 <= t.max_life_ms <= 8000


def test_spawn_on_narrow_field_starts_in_bounds():
    field = TargetField(60, 60, base_size=50, spawn_interval_ms=0, rng=random.Random(0))
    for i in range(50):
        t = field.spawn(i)
        assert t.radius <= t.x <= field.width - t.radius
        assert t.radius <= t.y <= field.height - t.radius


def test_spawn_on_field_smaller_than_target_is_centred():
    field = TargetField(30, 80, base_size=50, rng=random.Random(0))
    t = field.spawn(0)
    assert t.x == 15


def test_reset_clears_targets_and_spawn_timer():
    field = make_field()
    field.spawn(0)
    field.reset()
    assert len(field) == 0
    # spawn timer is cleared too, so spawning right away works
    assert field.spawn(10) is not None


def test_positions_stay_in_bounds_after_advance():
    field = make_field(base_speed=30, spawn_interval_ms=0)
    for i in range(25):
        field.spawn(i)
    for now in range(100, 2000, 16):
        field.advance(now)
        for t in field.targets:
            assert t.radius <= t.x <= field.width - t.radius
            assert t.radius <= t.y <= field.height - t.radius


def test_expiry_is_strictly_after_life():
    field = make_field()
    t = Target(100, 100, size=40, created_at=0, life_ms=5000, bounds=(400, 300))
    field.targets.append(t)

    assert field.advance(4999) == []
    assert field.targets == [t]
    assert field.advance(5000) == []

    assert field.advance(5001) == [t]
    assert field.targets == []


def test_hit_test_prefers_newest_on_overlap():
    field = make_field()
    a = Target(100, 100, size=40, bounds=(400, 300))
    b = Target(110, 100, size=40, bounds=(400, 300))
    field.targets.extend([a, b])
    assert field.hit_test((105, 100)) is b
    # only A covers this point
    assert field.hit_test((82, 100)) is a
    assert field.hit_test((300, 250)) is None


def test_remove_target():
    field = make_field()
    t = field.spawn(0)
    field.remove(t)
    assert len(field) == 0
    # removing twice is harmless
    field.remove(t)


def test_fade_uses_max_life_not_life():
    t = Target(50, 50, size=40, created_at=0, life_ms=5000, max_life_ms=8000)
    assert t.fade_alpha(0) == pytest.approx(1.0)
    assert t.fade_alpha(4000) == pytest.approx(1.0 - 0.5 * 0.7)
    assert t.fade_alpha(20000) == pytest.approx(0.3)


def test_field_size_must_be_positive():
    with pytest.raises(ValueError):
        TargetField(0, 300)
