"""Projectile physics for the Target mode.

Everything here is pure: no database, no Flask, no clock. Randomness is
taken from the ``rng`` argument so challenge generation is reproducible.
"""
import math
import random
from dataclasses import dataclass

from physquiz.errors import InvalidShot, UnreachableTarget

STANDARD_GRAVITY = 9.8
MIN_TARGET_HEIGHT_M = 0.5
# Keeps generated targets clear of the apex line at the wall
APEX_CLEARANCE_M = 0.75


def required_speed(g: float, angle_rad: float, x: float, y: float) -> float:
    """Launch speed that carries a projectile from the origin through (x, y).

    Raises UnreachableTarget when the point sits on or above the apex line
    ``y = x * tan(angle)`` for this angle.
    """
    cos_a = math.cos(angle_rad)
    denom = 2.0 * cos_a * cos_a * (x * math.tan(angle_rad) - y)
    if denom <= 0.0:
        raise UnreachableTarget(angle_rad, x, y)
    return math.sqrt((g * x * x) / denom)


def y_at_x(v: float, angle_rad: float, x: float, y0: float, g: float) -> float:
    """Height of the projectile once it has travelled ``x`` horizontally."""
    t = x / (v * math.cos(angle_rad))
    return y0 + v * math.sin(angle_rad) * t - 0.5 * g * t * t


def is_hit(y_at_wall: float, target_center_y: float, target_radius: float) -> bool:
    # grazing the rim counts
    return abs(y_at_wall - target_center_y) <= target_radius


@dataclass(frozen=True)
class TargetChallenge:
    angle_deg: float
    wall_distance: float
    target_height: float
    target_radius: float
    correct_speed: float
    gravity: float = STANDARD_GRAVITY

    @property
    def angle_rad(self) -> float:
        return math.radians(self.angle_deg)

    @property
    def prompt(self) -> str:
        return (
            f"Angle θ = {round(self.angle_deg)}°, wall = {self.wall_distance:.1f} m, "
            f"target height = {self.target_height:.1f} m. Enter v (m/s) and fire."
        )

    def to_dict(self, reveal: bool = False):
        data = {
            'angle_deg': self.angle_deg,
            'wall_distance': self.wall_distance,
            'target_height': self.target_height,
            'target_radius': self.target_radius,
            'gravity': self.gravity,
            'prompt': self.prompt,
        }
        if reveal:
            data['correct_speed'] = self.correct_speed
        return data


@dataclass(frozen=True)
class ShotResult:
    speed: float
    y_at_wall: float
    hit: bool
    correct_speed: float

    def to_dict(self):
        return {
            'speed': self.speed,
            'y_at_wall': self.y_at_wall,
            'hit': self.hit,
            'correct_speed': self.correct_speed,
        }


def challenge_for(angle_deg: float, wall_distance: float, target_height: float,
                  target_radius: float, g: float = STANDARD_GRAVITY) -> TargetChallenge:
    """Rebuild a challenge from its geometry, recomputing the correct speed."""
    speed = required_speed(g, math.radians(angle_deg), wall_distance, target_height)
    return TargetChallenge(
        angle_deg=angle_deg,
        wall_distance=wall_distance,
        target_height=target_height,
        target_radius=target_radius,
        correct_speed=speed,
        gravity=g,
    )


def _height_ceiling(wall_distance: float, angle_rad: float, max_height: float) -> float:
    ceiling = wall_distance * math.tan(angle_rad) - APEX_CLEARANCE_M
    return min(max(ceiling, MIN_TARGET_HEIGHT_M), max_height)


def new_target_challenge(rng: random.Random, *, g: float = STANDARD_GRAVITY,
                         wall_distance: float = 13.0, target_radius: float = 0.28,
                         max_height: float = 7.0, angle_min_deg: float = 30.0,
                         angle_max_deg: float = 60.0) -> TargetChallenge:
    """Pick a random reachable target for a random angle in the band."""
    angle_deg = angle_min_deg + rng.random() * (angle_max_deg - angle_min_deg)
    ceiling = _height_ceiling(wall_distance, math.radians(angle_deg), max_height)
    if ceiling <= MIN_TARGET_HEIGHT_M:
        angle_deg = (angle_min_deg + angle_max_deg) / 2.0
        ceiling = _height_ceiling(wall_distance, math.radians(angle_deg), max_height)
    target_height = MIN_TARGET_HEIGHT_M + rng.random() * (ceiling - MIN_TARGET_HEIGHT_M)
    return challenge_for(angle_deg, wall_distance, target_height, target_radius, g)


def judge_shot(challenge: TargetChallenge, speed: float) -> ShotResult:
    """Fly the shot to the wall and test it against the target circle.

    Correctness comes from the geometry, not from comparing speeds.
    """
    if not (math.isfinite(speed) and speed > 0):
        raise InvalidShot('Launch speed must be a finite number > 0')
    y = y_at_x(speed, challenge.angle_rad, challenge.wall_distance, 0.0, challenge.gravity)
    return ShotResult(
        speed=speed,
        y_at_wall=y,
        hit=is_hit(y, challenge.target_height, challenge.target_radius),
        correct_speed=challenge.correct_speed,
    )
