from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user

from physquiz import get_rounds
from physquiz.records import GameMode
from physquiz.services import physics

rounds = Blueprint('rounds', __name__)


def _number(data, key) -> float:
    try:
        return float(data[key])
    except (KeyError, TypeError, ValueError):
        raise ValueError(f"'{key}' must be a number") from None


def _own_session(session_id):
    """The caller's session, or None when missing or owned by someone else."""
    record = get_rounds().get_session(session_id)
    if record is None or record.user_id != current_user.id:
        return None
    return record


def _not_found():
    return jsonify({'error': 'Session not found'}), 404


def _mutation_response(session_id, changed):
    record = get_rounds().get_session(session_id)
    return jsonify({'changed': changed, 'session': record.to_dict() if record else None})


@rounds.route('/rounds', methods=['POST'])
@login_required
def start_round():
    data = request.get_json(silent=True) or {}
    mode = GameMode.parse(data.get('mode'))
    record = get_rounds().start_round(current_user.id, mode)
    if record is None:
        return jsonify({'error': 'User not found'}), 404
    return jsonify(record.to_dict()), 201


@rounds.route('/rounds', methods=['GET'])
@login_required
def list_rounds():
    return jsonify([s.to_dict() for s in get_rounds().list_sessions(current_user.id)])


@rounds.route('/rounds/<int:session_id>', methods=['GET'])
@login_required
def get_round(session_id):
    record = _own_session(session_id)
    if record is None:
        return _not_found()
    return jsonify(record.to_dict())


@rounds.route('/rounds/<int:session_id>/correct', methods=['POST'])
@login_required
def submit_correct(session_id):
    if _own_session(session_id) is None:
        return _not_found()
    return _mutation_response(session_id, get_rounds().submit_correct(session_id))


@rounds.route('/rounds/<int:session_id>/wrong', methods=['POST'])
@login_required
def submit_wrong(session_id):
    if _own_session(session_id) is None:
        return _not_found()
    return _mutation_response(session_id, get_rounds().submit_wrong(session_id))


@rounds.route('/rounds/<int:session_id>/finish', methods=['POST'])
@login_required
def finish_round(session_id):
    if _own_session(session_id) is None:
        return _not_found()
    return _mutation_response(session_id, get_rounds().finish_round(session_id))


@rounds.route('/rounds/<int:session_id>', methods=['DELETE'])
@login_required
def delete_round(session_id):
    if _own_session(session_id) is None:
        return _not_found()
    return jsonify({'deleted': get_rounds().delete_session(session_id)})


@rounds.route('/questions/<string:mode>', methods=['GET'])
def list_questions(mode):
    questions = get_rounds().questions_for(GameMode.parse(mode))
    return jsonify([
        dict(q.to_dict(), index=i) for i, q in enumerate(questions)
    ])


@rounds.route('/rounds/<int:session_id>/answer', methods=['POST'])
@login_required
def submit_answer(session_id):
    record = _own_session(session_id)
    if record is None:
        return _not_found()
    data = request.get_json(silent=True) or {}
    questions = get_rounds().questions_for(record.mode)
    index = data.get('question_index')
    if not isinstance(index, int) or not 0 <= index < len(questions):
        return jsonify({'error': 'Invalid question_index'}), 400
    result = get_rounds().submit_answer(session_id, questions[index], str(data.get('answer') or ''))
    current = get_rounds().get_session(session_id)
    return jsonify({'result': result.to_dict(), 'session': current.to_dict() if current else None})


@rounds.route('/target/challenge', methods=['POST'])
def new_challenge():
    return jsonify(get_rounds().new_target_challenge().to_dict())


@rounds.route('/rounds/<int:session_id>/shot', methods=['POST'])
@login_required
def submit_shot(session_id):
    record = _own_session(session_id)
    if record is None:
        return _not_found()
    if record.mode is not GameMode.TARGET:
        return jsonify({'error': 'Shots are only accepted in TARGET rounds'}), 400
    data = request.get_json(silent=True) or {}
    challenge = physics.challenge_for(
        angle_deg=_number(data, 'angle_deg'),
        wall_distance=_number(data, 'wall_distance'),
        target_height=_number(data, 'target_height'),
        # the radius is fixed server-side, never taken from the request
        target_radius=current_app.config['TARGET_RADIUS_M'],
        g=current_app.config['GRAVITY'],
    )
    shot = get_rounds().submit_shot(session_id, challenge, _number(data, 'speed'))
    current = get_rounds().get_session(session_id)
    return jsonify({'shot': shot.to_dict(), 'session': current.to_dict() if current else None})


@rounds.route('/leaderboard/<string:mode>', methods=['GET'])
def leaderboard(mode):
    limit = request.args.get('limit', default=current_app.config['LEADERBOARD_DEFAULT_LIMIT'], type=int)
    rows = get_rounds().leaderboard(GameMode.parse(mode), limit)
    return jsonify([row.to_dict() for row in rows])


@rounds.route('/highscore/<string:mode>', methods=['GET'])
@login_required
def high_score(mode):
    game_mode = GameMode.parse(mode)
    return jsonify({
        'mode': game_mode.value,
        'high_score': get_rounds().high_score(current_user.id, game_mode),
    })
