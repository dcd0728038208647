"""
Ambient particle field for the immersive environments.

Each environment binds one particle type. A field holds a fixed number of
particles that move by their own velocity every frame and wrap around the
visible bounds, so the count never changes while the animation runs.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

WRAP_MARGIN = 10  # px past an edge before a particle wraps


class ParticleType(str, Enum):
    RAIN = "rain"
    SNOW = "snow"
    LEAVES = "leaves"
    SPARKLES = "sparkles"
    BUBBLES = "bubbles"
    FIREFLIES = "fireflies"


@dataclass(frozen=True)
class Environment:
    id: str
    name: str
    description: str
    primary_color: str
    secondary_color: str
    particle_type: ParticleType
    particle_count: int


# ─── Environment Catalog ──────────────────────────────────────
ENVIRONMENTS = [
    Environment("rain", "Rainy Day", "Gentle rainfall with soft gray clouds",
                "#64748b", "#94a3b8", ParticleType.RAIN, 50),
    Environment("sunset", "Golden Sunset", "Warm sunset glow with floating particles",
                "#f59e0b", "#f97316", ParticleType.SPARKLES, 30),
    Environment("night", "Starry Night", "Peaceful night with twinkling stars",
                "#1e293b", "#334155", ParticleType.FIREFLIES, 25),
    Environment("forest", "Enchanted Forest", "Mystical forest with floating leaves",
                "#16a34a", "#22c55e", ParticleType.LEAVES, 40),
    Environment("ocean", "Ocean Depths", "Underwater serenity with bubbles",
                "#0ea5e9", "#06b6d4", ParticleType.BUBBLES, 35),
    Environment("winter", "Winter Wonderland", "Peaceful snowfall in a winter scene",
                "#e0f2fe", "#bae6fd", ParticleType.SNOW, 60),
    Environment("fireplace", "Cozy Fireplace", "Warm fireplace with dancing embers",
                "#dc2626", "#f97316", ParticleType.SPARKLES, 45),
    Environment("mountain", "Mountain Peak", "Serene mountain vista with gentle breeze",
                "#7c3aed", "#a855f7", ParticleType.SPARKLES, 20),
]

def get_environment(env_id: str) -> Environment:
    """Look up an environment by id, falling back to the first one."""
    for env in ENVIRONMENTS:
        if env.id == env_id:
            return env
    return ENVIRONMENTS[0]


# ─── Per-type Motion Rules ────────────────────────────────────
# (vx range, vy range, size range, palette) in px/frame and px
PARTICLE_RULES = {
    ParticleType.RAIN:      ((-1.0, 1.0), (2.0, 5.0),   (1.0, 3.0), ("#60a5fa",)),
    ParticleType.SNOW:      ((-0.5, 0.5), (0.5, 2.0),   (2.0, 5.0), ("#ffffff",)),
    ParticleType.LEAVES:    ((-1.0, 1.0), (0.5, 1.5),   (3.0, 7.0), ("#16a34a", "#22c55e", "#65a30d")),
    ParticleType.SPARKLES:  ((-1.0, 1.0), (-1.0, 1.0),  (1.0, 4.0), ("#fbbf24",)),
    ParticleType.BUBBLES:   ((-0.5, 0.5), (-3.0, -1.0), (3.0, 9.0), ("#67e8f9",)),
    ParticleType.FIREFLIES: ((-1.0, 1.0), (-1.0, 1.0),  (2.0, 4.0), ("#fde047",)),
}

OPACITY_RANGE = (0.3, 1.0)

RISING_TYPES = {ParticleType.BUBBLES}
# Falling types whose vy can also point up; they wrap at the top edge too
DRIFTING_TYPES = {ParticleType.SPARKLES, ParticleType.FIREFLIES}


@dataclass(frozen=True)
class Bounds:
    width: float
    height: float


@dataclass
class Particle:
    id: int
    x: float
    y: float
    vx: float
    vy: float
    size: float
    opacity: float
    color: str


def create_particle(pid: int, ptype: ParticleType, bounds: Bounds,
                    rng: random.Random) -> Particle:
    """Spawn one particle just outside the edge its motion comes from."""
    (vx_lo, vx_hi), (vy_lo, vy_hi), (s_lo, s_hi), palette = PARTICLE_RULES[ptype]
    vx = rng.uniform(vx_lo, vx_hi)
    vy = rng.uniform(vy_lo, vy_hi)
    size = rng.uniform(s_lo, s_hi)
    color = rng.choice(palette)
    x = rng.uniform(0, max(0, bounds.width))
    if ptype in RISING_TYPES:
        y = max(0, bounds.height) + rng.uniform(0, WRAP_MARGIN)
    else:
        y = -rng.uniform(0, WRAP_MARGIN)
    return Particle(pid, x, y, vx, vy, size, rng.uniform(*OPACITY_RANGE), color)


class ParticleField:
    """Owns the particles of the active environment."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.environment: Optional[Environment] = None
        self.bounds = Bounds(0, 0)
        self.particles: list[Particle] = []

    @property
    def particle_type(self) -> Optional[ParticleType]:
        return self.environment.particle_type if self.environment else None

    def initialize(self, environment: Environment, bounds: Bounds) -> None:
        self.environment = environment
        self.bounds = bounds
        ptype = environment.particle_type
        self.particles = [create_particle(i, ptype, bounds, self.rng)
                          for i in range(environment.particle_count)]

    def select(self, environment: Environment) -> None:
        """Replace the whole field with one for another environment."""
        self.initialize(environment, self.bounds)

    def advance(self, bounds: Optional[Bounds] = None) -> None:
        """Move every particle one frame and wrap the ones that left."""
        if bounds is not None:
            self.bounds = bounds
        if self.environment is None:
            return
        w, h = self.bounds.width, self.bounds.height
        ptype = self.environment.particle_type
        lo_x, hi_x = -WRAP_MARGIN, w + WRAP_MARGIN
        lo_y, hi_y = -WRAP_MARGIN, h + WRAP_MARGIN

        for p in self.particles:
            p.x += p.vx
            p.y += p.vy

            if ptype in RISING_TYPES:
                if p.y < lo_y:
                    p.y = hi_y
                    p.x = self.rng.uniform(0, max(0, w))
            else:
                if p.y > hi_y:
                    p.y = lo_y
                    p.x = self.rng.uniform(0, max(0, w))
                elif ptype in DRIFTING_TYPES and p.y < lo_y:
                    p.y = hi_y
                    p.x = self.rng.uniform(0, max(0, w))

            if p.x < lo_x:
                p.x = hi_x
            elif p.x > hi_x:
                p.x = lo_x

    def render(self, surface) -> None:
        """Draw the field onto a surface (see surfaces.ImageSurface)."""
        surface.clear()
        ptype = self.particle_type
        for p in self.particles:
            if ptype is ParticleType.BUBBLES:
                surface.stroke_circle(p.x, p.y, p.size, p.color, p.opacity, width=1)
            elif ptype is ParticleType.RAIN:
                surface.line(p.x, p.y, p.x, p.y + p.size * 2, p.color, p.opacity, width=1)
            else:
                surface.fill_circle(p.x, p.y, p.size, p.color, p.opacity)
