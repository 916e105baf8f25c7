"""Static question bank and the answer-matching rule.

Numeric free-response answers match within an absolute tolerance (0.01 by
default): the bank's answers are rounded to two or three significant places,
so a relative rule would be too strict for small values like 0.8.
"""
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from physquiz.records import GameMode

DEFAULT_TOLERANCE = 0.01

_FRACTION = re.compile(r'^(-?\d+(?:\.\d+)?)\s*/\s*(-?\d+(?:\.\d+)?)$')


@dataclass(frozen=True)
class Question:
    text: str
    answer: str
    options: Optional[Tuple[str, ...]] = None

    @property
    def is_multiple_choice(self) -> bool:
        return bool(self.options)

    def to_dict(self, reveal: bool = False):
        data = {'text': self.text, 'options': list(self.options) if self.options else None}
        if reveal:
            data['answer'] = self.answer
        return data


def _mcq(text, answer, *options):
    return Question(text, answer, tuple(options))


def _basics() -> List[Question]:
    return [
        _mcq("u = 20 m/s, t = 12s, a = 10 m/s². Which formula gives v?",
             "v = u + at", "v = u + at", "s = ut + 1/2 at²", "v² = u² + 2as", "s = 1/2 (u+v)t"),
        Question("If u = 0, a = 9.8 m/s², t = 5s. What is s?", "122.5"),
        _mcq("Which formula represents displacement with initial velocity?",
             "s = ut + 1/2 at²", "s = ut + 1/2 at²", "v = u + at", "F = ma", "E = mc²"),
        Question("u = 15 m/s, v = 35 m/s, t = 4s. What is a?", "5"),
        _mcq("Which of these equations is derived from Newton's second law?",
             "F = ma", "F = ma", "v = u + at", "s = ut + 1/2 at²", "p = mv"),
        Question("A car accelerates from rest at 2 m/s² for 6s. Find v.", "12"),
        Question("If s = 100m, u = 10 m/s, v = 30 m/s, find t using s = 1/2(u+v)t.", "5"),
        _mcq("Which formula relates velocity squared to displacement?",
             "v² = u² + 2as", "v² = u² + 2as", "s = ut + 1/2 at²", "p = mv", "v = u + at"),
        Question("u = 25 m/s, a = -5 m/s². Find time to stop.", "5"),
        Question("A stone is dropped (u = 0). Time = 3s. Find displacement.", "44.1"),
    ]


def _trig() -> List[Question]:
    return [
        _mcq("Simplify: tan 45° + cos 60°", "1.5", "1", "1.5", "√2/2", "2"),
        _mcq("Simplify: (1 - cos²θ) / sin²θ", "1", "1", "cosθ", "tanθ", "cosec²θ"),
        Question("In a right triangle, θ = 30° and hypotenuse = 10. "
                 "Find the length of the side opposite θ.", "5"),
        Question("If sinθ = 3/5, find cosθ (θ acute).", "0.8"),
        Question("If tanθ = 4/3, find sinθ (θ acute).", "0.8"),
        Question("Solve for θ: sinθ = 0.5, θ ∈ [0°, 60°].", "30"),
        Question("Simplify: sin²θ + cos²θ.", "1"),
        Question("If cosθ = 12/13, find tanθ (θ acute).", "0.417"),
        Question("Find the exact value of sin45° × cos30° + cos45° × sin30°.", "0.966"),
        Question("Solve for θ: tanθ = 1, θ ∈ [0°, 60°].", "45°"),
    ]


def _target() -> List[Question]:
    return [
        Question("A projectile is fired with u = 20 m/s at 30°. "
                 "Find horizontal component of velocity.", "17.3"),
        Question("A projectile is fired with u = 20 m/s at 30°. "
                 "Find vertical component of velocity.", "10"),
        _mcq("Time of flight formula is?", "T = 2u sinθ / g",
             "T = 2u sinθ / g", "T = u² sin2θ / g", "T = u cosθ / g", "T = 2u cosθ / g"),
        _mcq("Range formula is?", "R = u² sin2θ / g",
             "R = u² sin2θ / g", "R = 2u sinθ / g", "R = u cosθ / g", "R = u² / g"),
        _mcq("Max height formula is?", "H = u² sin²θ / 2g",
             "H = u² sin²θ / 2g", "H = u² cos²θ / 2g", "H = u² / 2g", "H = u sinθ / g"),
        Question("u = 25 m/s, θ = 45°. Find time of flight (g = 9.8).", "3.61"),
        Question("u = 25 m/s, θ = 45°. Find range (g = 9.8).", "63.8"),
        Question("u = 25 m/s, θ = 30°. Find max height (g = 9.8).", "7.97"),
        Question("A projectile lands back at same height. "
                 "Relationship between launch and landing angles?",
                 "Equal in magnitude, opposite in sign"),
        Question("If time of flight = 4s, horizontal velocity = 15 m/s. Find range.", "60.0"),
    ]


_BANKS = {
    GameMode.BASICS: _basics,
    GameMode.TRIG: _trig,
    GameMode.TARGET: _target,
}


class QuestionCatalog:
    """Read-only questions per mode, built once per process."""

    def __init__(self, banks=None):
        banks = banks or _BANKS
        missing = [m.value for m in GameMode if m not in banks]
        if missing:
            raise KeyError(f"No question bank for mode(s): {', '.join(missing)}")
        self._questions: Dict[GameMode, Tuple[Question, ...]] = {
            mode: tuple(build()) for mode, build in banks.items()
        }

    def questions_for(self, mode) -> List[Question]:
        return list(self._questions[GameMode.parse(mode)])


def _squash(text: str) -> str:
    return re.sub(r'\s+', '', text).lower()


def parse_number(text: str) -> Optional[float]:
    """Decimal or ``a/b`` fraction; a trailing degree sign is ignored."""
    s = (text or '').strip().rstrip('°').strip()
    if not s:
        return None
    m = _FRACTION.match(s)
    if m:
        denominator = float(m.group(2))
        if denominator == 0.0:
            return None
        return float(m.group(1)) / denominator
    try:
        return float(s)
    except ValueError:
        return None


def check_answer(question: Question, submitted: str, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    submitted = submitted or ''
    if question.is_multiple_choice:
        return _squash(submitted) == _squash(question.answer)
    expected = parse_number(question.answer)
    given = parse_number(submitted)
    if expected is not None and given is not None:
        return abs(given - expected) <= tolerance
    return ' '.join(submitted.split()).lower() == ' '.join(question.answer.split()).lower()
