from physquiz import socketio
from physquiz.records import GameMode


def _names(client):
    return [pkt['name'] for pkt in client.get_received('/ws')]


def test_socket_connect_and_join(sio_client):
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    sio_client.emit('join_leaderboard', {'mode': 'basics'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] in ('connected', 'joined') for pkt in received)
    joined = [pkt for pkt in received if pkt['name'] == 'joined']
    assert joined[0]['args'][0] == {'room': 'leaderboard:BASICS'}


def test_join_with_unknown_mode_reports_error(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_leaderboard', {'mode': 'chess'}, namespace='/ws')
    assert _names(sio_client) == ['error']


def test_ping_echoes_payload(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert received[0]['name'] == 'pong'
    assert received[0]['args'][0] == {'n': 1}


def test_completion_refreshes_leaderboard_watchers(flask_app, sio_client, rounds):
    sio_client.emit('join_leaderboard', {'mode': 'TRIG'}, namespace='/ws')
    sio_client.get_received('/ws')

    user = rounds.register('Alice', 'pw')
    session = rounds.start_round(user, GameMode.TRIG)
    rounds.submit_correct(session)
    assert 'leaderboard_update' not in _names(sio_client)

    rounds.finish_round(session)
    received = sio_client.get_received('/ws')
    updates = [pkt for pkt in received if pkt['name'] == 'leaderboard_update']
    assert updates and updates[0]['args'][0] == {'mode': 'TRIG'}


def test_watchers_see_session_updates(flask_app, sio_client, rounds):
    user = rounds.register('Alice', 'pw')
    session = rounds.start_round(user, GameMode.BASICS)
    sio_client.emit('watch_session', {'session_id': session.id}, namespace='/ws')
    sio_client.get_received('/ws')

    rounds.submit_correct(session)
    received = sio_client.get_received('/ws')
    updates = [pkt for pkt in received if pkt['name'] == 'session_update']
    assert len(updates) == 1
    assert updates[0]['args'][0]['session']['score'] == 1


def test_leaving_stops_leaderboard_updates(flask_app, sio_client, rounds):
    sio_client.emit('join_leaderboard', {'mode': 'basics'}, namespace='/ws')
    sio_client.emit('leave_leaderboard', {'mode': 'basics'}, namespace='/ws')
    assert 'left' in _names(sio_client)

    user = rounds.register('Alice', 'pw')
    session = rounds.start_round(user, GameMode.BASICS)
    rounds.finish_round(session)
    assert 'leaderboard_update' not in _names(sio_client)


def test_refinishing_sends_one_leaderboard_update(flask_app, sio_client, rounds):
    sio_client.emit('join_leaderboard', {'mode': 'basics'}, namespace='/ws')
    sio_client.get_received('/ws')

    user = rounds.register('Alice', 'pw')
    session = rounds.start_round(user, GameMode.BASICS)
    rounds.finish_round(session)
    rounds.finish_round(session)
    assert _names(sio_client).count('leaderboard_update') == 1


def test_second_client_is_isolated(flask_app, sio_client, rounds):
    other = socketio.test_client(flask_app, namespace='/ws')
    other.emit('join_leaderboard', {'mode': 'target'}, namespace='/ws')
    other.get_received('/ws')
    sio_client.get_received('/ws')

    user = rounds.register('Alice', 'pw')
    session = rounds.start_round(user, GameMode.TARGET)
    rounds.finish_round(session)
    assert 'leaderboard_update' in _names(other)
    assert 'leaderboard_update' not in _names(sio_client)
    other.disconnect(namespace='/ws')
