# tests/conftest.py
"""
Shared test fixtures.
Fake SpiceDB transport (session + client), a sample schema with nested
braces and comments, and a scripted stand-in for the zed binary.
"""
import json
import os
import sys
from pathlib import Path

import django
import pytest

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'saffron_django_app.settings')
django.setup()

from saffron_platform.client import SpiceDBClient  # noqa: E402
from saffron_platform.config import (  # noqa: E402
    ExecutorConfig,
    InterpreterConfig,
    PlatformConfig,
    SpiceDBConfig,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FAKE_ZED = FIXTURES_DIR / "fake_zed.py"

SPICEDB_URL = "http://spicedb.test:8443"

# ── Schema fixture ───────────────────────────────────────────────
SAMPLE_SCHEMA = """\
/** a user of the system */
definition user {}

// groups contain users { and other groups }
definition group {
    relation member: user | group#member
    permission membership = member
}

definition document {
    relation owner: user
    relation viewer: user | group#member with only_weekdays
    /* braces in comments { } must not close the block } */
    permission edit = owner
    permission view = viewer + edit // readers and writers
}

caveat only_weekdays(day string) {
    day != "saturday" && day != "sunday"
}
"""


# ── Fake HTTP transport ──────────────────────────────────────────

class FakeResponse:
    """Just enough of ``requests.Response`` for ``SpiceDBClient``."""

    def __init__(self, status_code=200, body=None, text=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        if text is None:
            text = "" if body is None else json.dumps(body)
        self.text = text

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """
    Records every POST and answers from a path → response table.
    A value that is an exception instance is raised instead.
    """

    def __init__(self, routes=None):
        self.headers = {}
        self.verify = True
        self.routes = dict(routes or {})
        self.calls = []

    def post(self, url, json=None, timeout=None):
        path = url.split("://", 1)[-1].split("/", 1)[-1]
        path = "/" + path
        self.calls.append({"url": url, "path": path, "json": json, "timeout": timeout})
        answer = self.routes.get(path, FakeResponse(404, {"message": f"no route {path}"}))
        if isinstance(answer, Exception):
            raise answer
        return answer

    def paths(self):
        return [call["path"] for call in self.calls]


class FakeClient:
    """
    Stand-in for ``SpiceDBClient`` used by adapter and executor tests:
    canned return values, every call recorded as ``(method, args)``.
    """

    def __init__(self, **answers):
        self.answers = answers
        self.calls = []

    def _answer(self, method, *args, **kwargs):
        self.calls.append((method, args, kwargs))
        answer = self.answers.get(method)
        if isinstance(answer, Exception):
            raise answer
        return answer

    def read_schema(self):
        return self._answer("read_schema")

    def write_schema(self, schema_text):
        return self._answer("write_schema", schema_text)

    def read_relationships(self, **filters):
        return self._answer("read_relationships", **filters)

    def write_relationships(self, operation, resource, relation, subject):
        return self._answer("write_relationships", operation, resource, relation, subject)

    def check_permission(self, resource, permission, subject, context=None):
        return self._answer("check_permission", resource, permission, subject)

    def expand_permission_tree(self, resource, permission):
        return self._answer("expand_permission_tree", resource, permission)

    def lookup_subjects(self, resource, permission, subject_type):
        return self._answer("lookup_subjects", resource, permission, subject_type)

    def methods(self):
        return [method for method, _, _ in self.calls]


# ── Fixtures ─────────────────────────────────────────────────────

@pytest.fixture
def sample_schema():
    return SAMPLE_SCHEMA


@pytest.fixture
def spicedb_config():
    return SpiceDBConfig(endpoint=SPICEDB_URL, token="test-token", timeout=5.0)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def spicedb_client(spicedb_config, fake_session):
    return SpiceDBClient(spicedb_config, session=fake_session)


@pytest.fixture
def fake_client():
    return FakeClient(read_schema="definition user {}")


@pytest.fixture
def process_config():
    """Platform config that runs the scripted fake zed through this interpreter."""
    return PlatformConfig(
        spicedb=SpiceDBConfig(
            endpoint="https://spicedb.test:8443",
            token="test-token",
            grpc_endpoint="spicedb.test:50051",
        ),
        executor=ExecutorConfig(
            strategy="process",
            zed_command=(sys.executable, str(FAKE_ZED)),
            process_timeout=10.0,
            max_output_bytes=64 * 1024,
            max_processes=2,
        ),
        interpreter=InterpreterConfig(),
    )
