"""Tests for collision detection and deferred removal."""

from orbit_guard.core.collisions import CollisionKind, resolve_collisions


def test_overlapping_satellites_destroy_each_other(earth, make_satellite):
    a = make_satellite("SAT-1", (200.0, 0.0), (0.0, 5.0))
    b = make_satellite("SAT-2", (205.0, 0.0), (0.0, -5.0))
    survivors, events = resolve_collisions([earth, a, b])

    assert [body.id for body in survivors] == [earth.id]
    assert len(events) == 1
    event = events[0]
    assert event.kind is CollisionKind.MUTUAL
    assert event.body_ids == ("SAT-1", "SAT-2")
    assert event.velocities == ((0.0, 5.0), (0.0, -5.0))
    assert set(event.removed_ids) == {"SAT-1", "SAT-2"}


def test_impact_with_fixed_body_removes_only_the_satellite(earth, make_satellite):
    sat = make_satellite("SAT-1", (33.0, 0.0), (-1.0, 0.0))
    survivors, events = resolve_collisions([earth, sat])

    assert survivors == [earth]
    assert events[0].kind is CollisionKind.IMPACT
    assert events[0].removed_ids == ("SAT-1",)
    assert "SAT-1" in events[0].describe()


def test_body_is_only_removed_once(make_satellite):
    a = make_satellite("SAT-1", (0.0, 0.0))
    b = make_satellite("SAT-2", (4.0, 0.0))
    c = make_satellite("SAT-3", (2.0, 3.0))
    survivors, events = resolve_collisions([a, b, c])

    assert len(events) == 1
    assert [body.id for body in survivors] == ["SAT-3"]


def test_touching_is_not_overlapping(make_satellite):
    a = make_satellite("SAT-1", (0.0, 0.0))
    b = make_satellite("SAT-2", (12.0, 0.0))
    survivors, events = resolve_collisions([a, b])
    assert events == []
    assert survivors == [a, b]


def test_fixed_pairs_are_ignored(earth):
    other = earth.clone()
    other.id = "MOON"
    survivors, events = resolve_collisions([earth, other])
    assert events == []
    assert len(survivors) == 2


def test_order_of_survivors_preserved(earth, make_satellite):
    bodies = [
        earth,
        make_satellite("SAT-1", (100.0, 0.0)),
        make_satellite("SAT-2", (0.0, 150.0)),
        make_satellite("SAT-3", (103.0, 0.0)),
        make_satellite("SAT-4", (-150.0, 0.0)),
    ]
    survivors, _ = resolve_collisions(bodies)
    assert [body.id for body in survivors] == ["EARTH", "SAT-2", "SAT-4"]


def test_fewer_than_two_bodies(earth):
    assert resolve_collisions([]) == ([], [])
    assert resolve_collisions([earth]) == ([earth], [])
