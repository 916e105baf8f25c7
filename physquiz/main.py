from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user

from physquiz import db, get_rounds
from physquiz.errors import StorageFailure, UsernameTaken
from physquiz.models import User

main = Blueprint('main', __name__)


@main.app_errorhandler(UsernameTaken)
def handle_username_taken(exc):
    return jsonify({'error': str(exc)}), 409


@main.app_errorhandler(ValueError)
def handle_bad_input(exc):
    return jsonify({'error': str(exc)}), 400


@main.app_errorhandler(StorageFailure)
def handle_storage_failure(exc):
    current_app.logger.error(f"[http-500] {exc}")
    return jsonify({'error': 'Storage unavailable'}), 500


def _secret(value) -> bytearray:
    # services zero a bytearray once hashed or checked
    return bytearray(str(value), 'utf-8')


def _login(record):
    user = db.session.get(User, record.id)
    login_user(user, remember=True)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the physics quiz server!'})


@main.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    if not data.get('username') or not data.get('password'):
        return jsonify({'error': 'Missing username or password'}), 400
    record = get_rounds().register(data['username'], _secret(data['password']))
    _login(record)
    return jsonify({'success': True, 'user': record.to_dict()}), 201


@main.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    record = get_rounds().login(data.get('username'), _secret(data.get('password') or ''))
    if record is None:
        return jsonify({'success': False, 'error': 'Invalid username or password'}), 401
    _login(record)
    return jsonify({'success': True, 'user': record.to_dict()})


@main.route('/check_login')
@login_required
def check_login():
    return jsonify({'success': True, 'user': current_user.to_dict()})


@main.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'success': True})


@main.route('/users')
@login_required
def list_users():
    return jsonify([u.to_dict() for u in get_rounds().list_users()])


@main.route('/users/me/username', methods=['PATCH'])
@login_required
def change_username():
    data = request.get_json(silent=True) or {}
    if not data.get('username'):
        return jsonify({'error': 'Missing username'}), 400
    user_id = current_user.id
    if not get_rounds().rename_user(user_id, data['username']):
        return jsonify({'error': 'User not found'}), 404
    return jsonify({'success': True, 'user': get_rounds().get_user(user_id).to_dict()})


@main.route('/users/me/password', methods=['PATCH'])
@login_required
def change_password():
    data = request.get_json(silent=True) or {}
    if not data.get('password'):
        return jsonify({'error': 'Missing password'}), 400
    if not get_rounds().change_password(current_user.id, _secret(data['password'])):
        return jsonify({'error': 'User not found'}), 404
    return jsonify({'success': True})


@main.route('/users/me', methods=['DELETE'])
@login_required
def delete_account():
    user_id = current_user.id
    logout_user()
    deleted = get_rounds().delete_account(user_id)
    return jsonify({'deleted': deleted})
