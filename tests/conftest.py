# tests/conftest.py - canned transport for HttpUtility tests
import json

import pytest
import requests


def make_response(status=200, body=b"", reason="OK"):
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")
    resp._content = body
    resp.headers["Content-Type"] = "application/json"
    return resp


class FakeSession(requests.Session):
    """Records every prepared request and answers with the queued response (or raises it)."""

    def __init__(self):
        super().__init__()
        self.sent = []
        self.timeouts = []
        self.queue = []

    def reply(self, status=200, body=b"", reason="OK"):
        self.queue.append(make_response(status, body, reason))
        return self

    def fail(self, exc):
        self.queue.append(exc)
        return self

    def send(self, request, **kwargs):
        self.sent.append(request)
        self.timeouts.append(kwargs.get("timeout"))
        outcome = self.queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        outcome.url = request.url
        outcome.request = request
        return outcome

    @property
    def last(self):
        return self.sent[-1]


@pytest.fixture
def session():
    return FakeSession()
