import random

import pytest

from still_water.particles import (ENVIRONMENTS, PARTICLE_RULES, WRAP_MARGIN, Bounds,
                                   Environment, Particle, ParticleField, ParticleType,
                                   create_particle, get_environment)

BOUNDS = Bounds(200, 100)


def env_of(ptype, count=20):
    return Environment(f"test-{ptype.value}", ptype.value.title(), "", "#000000", "#ffffff",
                       ptype, count)


class RecordingSurface:
    """Collects draw calls instead of painting."""

    def __init__(self):
        self.calls = []

    def clear(self):
        self.calls.append(("clear",))

    def fill_circle(self, x, y, r, color, opacity=1.0):
        self.calls.append(("fill_circle", x, y, r, color, opacity))

    def stroke_circle(self, x, y, r, color, opacity=1.0, width=1):
        self.calls.append(("stroke_circle", x, y, r, color, opacity, width))

    def line(self, x0, y0, x1, y1, color, opacity=1.0, width=1):
        self.calls.append(("line", x0, y0, x1, y1, color, opacity, width))


@pytest.fixture
def field():
    return ParticleField(random.Random(1234))


@pytest.mark.parametrize("env", ENVIRONMENTS, ids=lambda e: e.id)
def test_initialize_creates_particle_count(field, env):
    field.initialize(env, BOUNDS)
    assert len(field.particles) == env.particle_count
    assert [p.id for p in field.particles] == list(range(env.particle_count))


def test_select_replaces_whole_field(field):
    field.initialize(get_environment("winter"), BOUNDS)
    old = list(field.particles)
    field.select(get_environment("night"))
    assert len(field.particles) == get_environment("night").particle_count
    assert all(p is not o for p in field.particles for o in old)
    assert all(p.color == "#fde047" for p in field.particles)
    assert field.bounds == BOUNDS


def test_seeded_fields_are_identical():
    a, b = ParticleField(random.Random(7)), ParticleField(random.Random(7))
    env = get_environment("forest")
    a.initialize(env, BOUNDS)
    b.initialize(env, BOUNDS)
    for _ in range(50):
        a.advance()
        b.advance()
    assert a.particles == b.particles


@pytest.mark.parametrize("ptype", list(ParticleType), ids=lambda t: t.value)
def test_spawn_rules(ptype):
    rng = random.Random(99)
    (vx_lo, vx_hi), (vy_lo, vy_hi), (s_lo, s_hi), palette = PARTICLE_RULES[ptype]
    for i in range(200):
        p = create_particle(i, ptype, BOUNDS, rng)
        assert vx_lo <= p.vx <= vx_hi
        assert vy_lo <= p.vy <= vy_hi
        assert s_lo <= p.size <= s_hi
        assert p.color in palette
        assert 0.3 <= p.opacity <= 1.0
        assert 0 <= p.x <= BOUNDS.width
        if ptype is ParticleType.BUBBLES:
            assert BOUNDS.height <= p.y <= BOUNDS.height + WRAP_MARGIN
        else:
            assert -WRAP_MARGIN <= p.y <= 0


def test_rule_table_values():
    assert PARTICLE_RULES[ParticleType.RAIN][3] == ("#60a5fa",)
    assert PARTICLE_RULES[ParticleType.BUBBLES][1] == (-3.0, -1.0)
    assert len(PARTICLE_RULES[ParticleType.LEAVES][3]) == 3


def test_leaves_use_all_greens():
    rng = random.Random(3)
    colors = {create_particle(i, ParticleType.LEAVES, BOUNDS, rng).color for i in range(300)}
    assert colors == {"#16a34a", "#22c55e", "#65a30d"}


@pytest.mark.parametrize("ptype", list(ParticleType), ids=lambda t: t.value)
def test_particles_stay_in_bounds(ptype):
    field = ParticleField(random.Random(5))
    field.initialize(env_of(ptype, 40), BOUNDS)
    for _ in range(1000):
        field.advance(BOUNDS)
        for p in field.particles:
            assert -WRAP_MARGIN <= p.x <= BOUNDS.width + WRAP_MARGIN
            if ptype is ParticleType.BUBBLES:
                assert p.y <= BOUNDS.height + WRAP_MARGIN
            else:
                assert -WRAP_MARGIN <= p.y <= BOUNDS.height + WRAP_MARGIN
    assert len(field.particles) == 40


def place(field, **kw):
    p = field.particles[0]
    for k, v in kw.items():
        setattr(p, k, v)
    return p


def test_falling_particle_wraps_to_top(field):
    field.initialize(env_of(ParticleType.SNOW, 1), BOUNDS)
    p = place(field, x=50, y=109, vx=0, vy=2)
    field.advance()
    assert p.y == -WRAP_MARGIN
    assert 0 <= p.x <= BOUNDS.width


def test_bubble_wraps_to_bottom(field):
    field.initialize(env_of(ParticleType.BUBBLES, 1), BOUNDS)
    p = place(field, x=50, y=-9, vx=0, vy=-2)
    field.advance()
    assert p.y == BOUNDS.height + WRAP_MARGIN


def test_bubble_does_not_wrap_at_bottom(field):
    field.initialize(env_of(ParticleType.BUBBLES, 1), BOUNDS)
    p = place(field, x=50, y=105, vx=0, vy=-1)
    field.advance()
    assert p.y == 104


def test_rising_sparkle_wraps_to_bottom(field):
    field.initialize(env_of(ParticleType.SPARKLES, 1), BOUNDS)
    p = place(field, x=50, y=-9.5, vx=0, vy=-1)
    field.advance()
    assert p.y == BOUNDS.height + WRAP_MARGIN


def test_horizontal_wrap(field):
    field.initialize(env_of(ParticleType.RAIN, 2), BOUNDS)
    left, right = field.particles
    left.x, left.y, left.vx, left.vy = -9.5, 50, -1, 2
    right.x, right.y, right.vx, right.vy = 209.5, 50, 1, 2
    field.advance()
    assert left.x == BOUNDS.width + WRAP_MARGIN
    assert right.x == -WRAP_MARGIN
    assert left.y == right.y == 52


def test_advance_picks_up_new_bounds(field):
    field.initialize(env_of(ParticleType.SNOW, 1), BOUNDS)
    p = place(field, x=50, y=109, vx=0, vy=2)
    field.advance(Bounds(200, 300))
    assert p.y == 111
    assert field.bounds == Bounds(200, 300)


def test_advance_without_environment_is_noop():
    field = ParticleField(random.Random(0))
    field.advance(BOUNDS)
    assert field.particles == []


def test_degenerate_bounds_do_not_fail(field):
    field.initialize(get_environment("rain"), Bounds(0, 0))
    assert len(field.particles) == 50
    assert all(p.x == 0 for p in field.particles)
    field.advance()


def test_render_shapes_per_type(field):
    field.initialize(env_of(ParticleType.BUBBLES, 3), BOUNDS)
    s = RecordingSurface()
    field.render(s)
    assert s.calls[0] == ("clear",)
    assert [c[0] for c in s.calls[1:]] == ["stroke_circle"] * 3
    assert all(c[-1] == 1 for c in s.calls[1:])

    field.select(env_of(ParticleType.RAIN, 2))
    s = RecordingSurface()
    field.render(s)
    for call, p in zip(s.calls[1:], field.particles):
        _, x0, y0, x1, y1, color, opacity, _ = call
        assert (x0, y0, x1) == (p.x, p.y, p.x)
        assert y1 - y0 == pytest.approx(p.size * 2)
        assert (color, opacity) == (p.color, p.opacity)

    field.select(env_of(ParticleType.FIREFLIES, 4))
    s = RecordingSurface()
    field.render(s)
    assert [c[0] for c in s.calls[1:]] == ["fill_circle"] * 4


def test_get_environment_falls_back_to_first():
    assert get_environment("ocean").particle_type is ParticleType.BUBBLES
    assert get_environment("moon") is ENVIRONMENTS[0]


def test_particle_is_mutable_record():
    p = Particle(0, 1.0, 2.0, 0.5, 0.5, 3.0, 0.8, "#ffffff")
    p.x += p.vx
    assert p.x == 1.5
