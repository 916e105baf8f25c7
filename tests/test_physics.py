import math
import random

import pytest

from physquiz.errors import InvalidShot, UnreachableTarget
from physquiz.services import physics


@pytest.mark.parametrize('angle_deg, x, y', [
    (45.0, 12.0, 3.0),
    (30.0, 13.0, 0.5),
    (60.0, 13.0, 7.0),
    (35.0, 10.0, -2.0),
    (50.0, 1.0, 1.1),
])
def test_required_speed_round_trips_through_y_at_x(angle_deg, x, y):
    g = 9.8
    angle = math.radians(angle_deg)
    v = physics.required_speed(g, angle, x, y)
    assert v > 0
    assert physics.y_at_x(v, angle, x, 0.0, g) == pytest.approx(y, abs=1e-6)


def test_required_speed_rejects_target_on_apex_line():
    angle = math.radians(35.0)
    x = 10.0
    with pytest.raises(UnreachableTarget):
        physics.required_speed(9.8, angle, x, x * math.tan(angle))


def test_required_speed_rejects_target_above_apex_line():
    angle = math.radians(35.0)
    with pytest.raises(UnreachableTarget) as excinfo:
        physics.required_speed(9.8, angle, 10.0, 10.0 * math.tan(angle) + 0.5)
    assert isinstance(excinfo.value, ValueError)


def test_y_at_x_starts_from_launch_height():
    # zero horizontal distance means zero flight time
    assert physics.y_at_x(12.0, math.radians(40), 0.0, 1.5, 9.8) == pytest.approx(1.5)


def test_is_hit_boundaries():
    center, radius = 300.0, 14.0
    assert physics.is_hit(center, center, radius)
    assert physics.is_hit(center + radius, center, radius)
    assert physics.is_hit(center - radius, center, radius)
    assert not physics.is_hit(center + radius + 1e-9, center, radius)
    assert not physics.is_hit(315.0, center, radius)


def test_is_hit_zero_radius_only_exact():
    assert physics.is_hit(2.0, 2.0, 0.0)
    assert not physics.is_hit(2.0001, 2.0, 0.0)


def test_new_target_challenge_is_reachable_and_in_band():
    rng = random.Random(7)
    for _ in range(200):
        c = physics.new_target_challenge(rng)
        assert 30.0 <= c.angle_deg <= 60.0
        assert physics.MIN_TARGET_HEIGHT_M <= c.target_height <= 7.0
        assert c.target_height < c.wall_distance * math.tan(c.angle_rad)
        y = physics.y_at_x(c.correct_speed, c.angle_rad, c.wall_distance, 0.0, c.gravity)
        assert y == pytest.approx(c.target_height, abs=1e-6)


def test_new_target_challenge_is_reproducible_with_seed():
    a = physics.new_target_challenge(random.Random(42))
    b = physics.new_target_challenge(random.Random(42))
    assert a == b


class _ZeroRng:
    def random(self):
        return 0.0


def test_new_target_challenge_falls_back_to_mid_angle_without_headroom():
    # at 30 degrees a 1 m wall leaves no room above the minimum height
    c = physics.new_target_challenge(_ZeroRng(), wall_distance=1.0)
    assert c.angle_deg == pytest.approx(45.0)
    assert c.target_height == pytest.approx(physics.MIN_TARGET_HEIGHT_M)
    assert c.correct_speed > 0


def test_new_target_challenge_refuses_geometry_with_no_reachable_target():
    with pytest.raises(UnreachableTarget):
        physics.new_target_challenge(_ZeroRng(), wall_distance=0.5)


def test_judge_shot_hits_with_correct_speed():
    c = physics.challenge_for(45.0, 13.0, 3.0, 0.28)
    result = physics.judge_shot(c, c.correct_speed)
    assert result.hit
    assert result.y_at_wall == pytest.approx(3.0)


def test_judge_shot_accepts_nearby_speed_by_geometry():
    c = physics.challenge_for(45.0, 13.0, 3.0, 0.28)
    assert physics.judge_shot(c, c.correct_speed + 0.05).hit


def test_judge_shot_misses_slow_and_fast():
    c = physics.challenge_for(45.0, 13.0, 3.0, 0.28)
    assert not physics.judge_shot(c, c.correct_speed * 0.8).hit
    assert not physics.judge_shot(c, c.correct_speed * 1.3).hit


@pytest.mark.parametrize('speed', [0.0, -3.0, float('nan'), float('inf')])
def test_judge_shot_rejects_non_positive_or_infinite_speed(speed):
    c = physics.challenge_for(45.0, 13.0, 3.0, 0.28)
    with pytest.raises(InvalidShot):
        physics.judge_shot(c, speed)


def test_challenge_to_dict_hides_answer_unless_revealed():
    c = physics.challenge_for(40.0, 13.0, 2.0, 0.28)
    assert 'correct_speed' not in c.to_dict()
    assert c.to_dict(reveal=True)['correct_speed'] == pytest.approx(c.correct_speed)
    assert '40°' in c.prompt
