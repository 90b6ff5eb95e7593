"""
Shared fixtures: a stand-in for MailchimpTransport that answers from a
route table and records every call.
"""

from unittest.mock import Mock

import pytest

from mailchimp_subscribe.errors import TransportError


LIST_ID = "list123"


class FakeMailchimp:
    """Routes (method, endpoint) to canned bodies; call is a Mock for assertions"""

    def __init__(self):
        self.routes = {}
        self.call = Mock(side_effect=self._dispatch)

    def route(self, method, endpoint, body):
        self.routes[(method, endpoint)] = body
        return self

    def _dispatch(self, endpoint, method="GET", payload=None, params=None):
        key = (method, endpoint)
        if key not in self.routes:
            raise TransportError("Resource Not Found", 404, endpoint, method)
        body = self.routes[key]
        if isinstance(body, Exception):
            raise body
        if callable(body):
            return body(payload)
        return body

    def calls_to(self, method, endpoint=None):
        """Recorded calls for one method (and optionally one endpoint)"""
        found = []
        for c in self.call.call_args_list:
            args = list(c.args) + [None, None]
            call_endpoint = c.kwargs.get("endpoint", args[0])
            call_method = c.kwargs.get("method", args[1] or "GET")
            call_payload = c.kwargs.get("payload", args[2])
            if call_method == method and (endpoint is None or call_endpoint == endpoint):
                found.append((call_endpoint, call_payload))
        return found


@pytest.fixture
def fake():
    return FakeMailchimp()


@pytest.fixture
def membership_list(fake):
    """One "Membership" category with Free/Paid and one "Topics" category"""
    fake.route("GET", f"/lists/{LIST_ID}/interest-categories", {
        "categories": [
            {"id": "cat1", "title": "Membership", "list_id": LIST_ID},
            {"id": "cat2", "title": "Topics", "list_id": LIST_ID},
        ]
    })
    fake.route("GET", f"/lists/{LIST_ID}/interest-categories/cat1/interests", {
        "interests": [
            {"id": "id1", "name": "Free", "category_id": "cat1"},
            {"id": "id2", "name": "Paid", "category_id": "cat1"},
        ]
    })
    fake.route("GET", f"/lists/{LIST_ID}/interest-categories/cat2/interests", {
        "interests": [
            {"id": "id3", "name": "News", "category_id": "cat2"},
            {"id": "id4", "name": "Sport", "category_id": "cat2"},
        ]
    })
    return fake
