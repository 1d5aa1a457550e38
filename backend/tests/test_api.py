def test_index_reports_liveness(client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.mimetype == 'text/plain'
    assert res.get_data(as_text=True) == 'Tetris WebSocket Server is running!'


def test_unknown_route_is_404(client):
    assert client.get('/api/games/create').status_code == 404
