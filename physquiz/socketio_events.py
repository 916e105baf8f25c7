from flask_socketio import join_room, leave_room, emit

from physquiz import socketio
from physquiz.records import GameMode, SessionRecord

NAMESPACE = '/ws'


def _leaderboard_room(mode: GameMode) -> str:
    return f"leaderboard:{mode.value}"


def _session_room(session_id: int) -> str:
    return f"session:{session_id}"


def broadcast_session_event(event: str, record: SessionRecord) -> None:
    """Push a session change to watchers; completions also refresh leaderboards."""
    if event == 'session_update':
        socketio.emit('session_update', {'session': record.to_dict()},
                      to=_session_room(record.id), namespace=NAMESPACE)
    elif event == 'session_completed':
        socketio.emit('leaderboard_update', {'mode': record.mode.value},
                      to=_leaderboard_room(record.mode), namespace=NAMESPACE)


def _mode_from(data):
    try:
        return GameMode.parse((data or {}).get('mode'))
    except ValueError:
        emit('error', {'message': 'a valid mode is required'})
        return None


def handle_connect():
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_join_leaderboard(data):
    mode = _mode_from(data)
    if mode is None:
        return
    room = _leaderboard_room(mode)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_leaderboard(data):
    mode = _mode_from(data)
    if mode is None:
        return
    room = _leaderboard_room(mode)
    leave_room(room)
    emit('left', {'room': room})


def handle_watch_session(data):
    session_id = (data or {}).get('session_id')
    if not isinstance(session_id, int):
        emit('error', {'message': 'session_id is required'})
        return
    room = _session_room(session_id)
    join_room(room)
    emit('joined', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'join_leaderboard': handle_join_leaderboard,
        'leave_leaderboard': handle_leave_leaderboard,
        'watch_session': handle_watch_session,
        'ping': handle_ping,
    }
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        for name, handler in handlers.items():
            socketio.on_event(name, handler, namespace=namespace)
