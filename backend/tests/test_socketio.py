from conftest import auth_header, register


def test_socket_connect_and_join(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    sio_client.emit('join_leaderboard', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)
    assert any(pkt['name'] == 'joined' and pkt['args'][0] == {'room': 'leaderboard'} for pkt in received)


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')  # flush
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_raised_high_score_is_pushed(sio_client, client):
    sio_client.emit('join_leaderboard', {}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    token = register(client, 'alice')
    client.post('/api/highscore', json={'score': 75}, headers=auth_header(token))
    updates = [p for p in sio_client.get_received('/ws') if p['name'] == 'leaderboard_update']
    assert updates and updates[0]['args'][0] == {'username': 'alice', 'highScore': 75}

    # A lower score changes nothing, so nothing is pushed
    client.post('/api/highscore', json={'score': 10}, headers=auth_header(token))
    assert not [p for p in sio_client.get_received('/ws') if p['name'] == 'leaderboard_update']


def test_leave_leaderboard_stops_updates(sio_client, client):
    sio_client.emit('join_leaderboard', {}, namespace='/ws')
    sio_client.emit('leave_leaderboard', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'left' for pkt in received)

    token = register(client, 'bob')
    client.post('/api/highscore', json={'score': 5}, headers=auth_header(token))
    assert not [p for p in sio_client.get_received('/ws') if p['name'] == 'leaderboard_update']
