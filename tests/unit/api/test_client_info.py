from starlette.requests import Request

from account_service.api.utils.client_info import get_client_info, get_client_ip


def make_request(headers=None, client=("192.0.2.1", 1234)):
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({"type": "http", "headers": raw_headers, "client": client})


def test_first_forwarded_hop_wins():
    request = make_request({"X-Forwarded-For": "203.0.113.5, 10.0.0.1", "X-Real-IP": "10.9.9.9"})
    assert get_client_ip(request) == "203.0.113.5"


def test_real_ip_when_not_forwarded():
    assert get_client_ip(make_request({"X-Real-IP": "198.51.100.2"})) == "198.51.100.2"


def test_socket_peer_fallback():
    assert get_client_ip(make_request()) == "192.0.2.1"


def test_unknown_fallbacks():
    info = get_client_info(make_request(client=None))

    assert info.ip_address == "unknown-ip"
    assert info.user_agent == "unknown-user-agent"


def test_user_agent_is_read():
    info = get_client_info(make_request({"User-Agent": "Mozilla/5.0"}))
    assert info.user_agent == "Mozilla/5.0"
