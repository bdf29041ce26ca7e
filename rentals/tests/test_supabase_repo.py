import pytest

from rentals.core.supabase_repo import SupabaseRepo


class FakeQuery:
    def __init__(self, log, data):
        self.log = log
        self.data = data

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.log.append((name, args, kwargs))
            return self

        return record

    def execute(self):
        self.log.append(("execute", (), {}))
        return self


class FakeClient:
    def __init__(self, data):
        self.log = []
        self.data = data

    def table(self, name):
        self.log.append(("table", (name,), {}))
        return FakeQuery(self.log, self.data)


def _repo(data):
    repo = SupabaseRepo.__new__(SupabaseRepo)
    repo.client = FakeClient(data)
    return repo


def test_missing_credentials_raise(monkeypatch):
    for name in ("SUPABASE_URL", "SUPABASE_KEY", "SUPABASE_SERVICE_ROLE_KEY"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ValueError):
        SupabaseRepo()


def test_get_active_properties_filters_status_and_orders_newest_first():
    repo = _repo([{"id": 1}])
    assert repo.get_active_properties(limit=30) == [{"id": 1}]
    calls = [(name, args, kwargs) for name, args, kwargs in repo.client.log]
    assert ("table", ("properties",), {}) in calls
    assert ("eq", ("status", "active"), {}) in calls
    assert ("order", ("created_at",), {"desc": True}) in calls
    assert ("limit", (30,), {}) in calls


def test_get_active_properties_handles_empty_response():
    assert _repo(None).get_active_properties() == []

