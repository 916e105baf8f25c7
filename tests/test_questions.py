import pytest

from physquiz.records import GameMode
from physquiz.services.questions import Question, QuestionCatalog, check_answer, parse_number


@pytest.fixture()
def catalog():
    return QuestionCatalog()


@pytest.mark.parametrize('mode', list(GameMode))
def test_every_mode_has_ten_valid_questions(catalog, mode):
    questions = catalog.questions_for(mode)
    assert len(questions) == 10
    for q in questions:
        assert q.text.strip()
        assert q.answer.strip()
        if q.options:
            assert q.answer in q.options


def test_question_sets_are_distinct(catalog):
    texts = [q.text for m in GameMode for q in catalog.questions_for(m)]
    assert len(texts) == len(set(texts))


def test_catalog_returns_copies(catalog):
    catalog.questions_for(GameMode.BASICS).clear()
    assert len(catalog.questions_for(GameMode.BASICS)) == 10


def test_catalog_requires_a_bank_for_every_mode():
    with pytest.raises(KeyError):
        QuestionCatalog(banks={GameMode.BASICS: list})


def test_multiple_choice_ignores_case_and_spacing():
    q = Question('Which?', 'F = ma', ('F = ma', 'p = mv'))
    assert check_answer(q, 'f=MA')
    assert not check_answer(q, 'p = mv')


@pytest.mark.parametrize('given, ok', [
    ('0.8', True),
    ('0.805', True),
    ('0.809', True),
    ('4/5', True),
    ('0.82', False),
    ('eight tenths', False),
    ('', False),
])
def test_numeric_answers_use_absolute_tolerance(given, ok):
    assert check_answer(Question('cos?', '0.8'), given) is ok


def test_degree_sign_is_ignored():
    assert check_answer(Question('θ?', '45°'), '45')
    assert check_answer(Question('θ?', '30'), '30°')


def test_free_text_matches_case_insensitively():
    q = Question('Angles?', 'Equal in magnitude, opposite in sign')
    assert check_answer(q, '  equal in magnitude,  opposite in sign ')
    assert not check_answer(q, 'equal')


def test_tolerance_can_be_widened():
    assert check_answer(Question('g?', '9.8'), '9.75', tolerance=0.1)
    assert not check_answer(Question('g?', '9.8'), '9.75')


@pytest.mark.parametrize('text, value', [
    ('3/5', 0.6),
    (' -1.5 ', -1.5),
    ('1/0', None),
    ('abc', None),
    ('', None),
])
def test_parse_number(text, value):
    assert parse_number(text) == (pytest.approx(value) if value is not None else None)
