from dataclasses import dataclass

from detector.models import CallbackPayload
from detector.notifier import send_callback


@dataclass
class _Resp:
    status_code: int


def _payload() -> CallbackPayload:
    return CallbackPayload(task_id="t1", status="completed", duration_ms=7)


def test_send_callback_posts_json():
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append((url, json, timeout))
        return _Resp(200)

    assert send_callback("http://cb/callback", _payload(), timeout_seconds=3, post=fake_post) is True
    assert calls == [("http://cb/callback", {"taskId": "t1", "status": "completed", "durationMs": 7}, 3.0)]


def test_send_callback_non_2xx_returns_false():
    assert send_callback("http://cb", _payload(), post=lambda *a, **k: _Resp(502)) is False


def test_send_callback_swallows_exceptions():
    def fake_post(*args, **kwargs):
        raise OSError("network down")

    assert send_callback("http://cb", _payload(), post=fake_post) is False
