from types import SimpleNamespace

import httpx
import pytest
from supabase import AuthApiError, PostgrestAPIError

from wardrobe_api.remote import SupabaseRemote
from wardrobe_api.remote.types import Filter, Order, QuerySpec, RemoteError

BASE = "https://project.supabase.co"


class FakeQuery:
    """Records every builder call and answers ``execute`` with a canned response."""

    def __init__(self, calls, response):
        self.calls = calls
        self.response = response

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return record

    async def execute(self):
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def user(uid, email="a@b.com", **metadata):
    return SimpleNamespace(id=uid, email=email, user_metadata=metadata)


class FakeAuth:
    def __init__(self):
        self.calls = []
        self.admin = SimpleNamespace(create_user=self._admin_create_user)

    async def get_user(self, jwt=None):
        self.calls.append(("get_user", jwt))
        if jwt != "good":
            raise AuthApiError("invalid JWT", 401, "bad_jwt")
        return SimpleNamespace(user=user("u1"))

    async def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials))
        return SimpleNamespace(user=user("u2", credentials["email"], **credentials["options"]["data"]), session=None)

    async def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in_with_password", credentials))
        return SimpleNamespace(user=user("u2"), session=SimpleNamespace(access_token="tok"))

    async def _admin_create_user(self, attributes):
        self.calls.append(("admin.create_user", attributes))
        raise AuthApiError("A user with this email address has already been registered", 422, "email_exists")


class FakePostgrest:
    def __init__(self):
        self.closed = False

    async def aclose(self):
        self.closed = True


class FakeClient:
    def __init__(self, key, options):
        self.key = key
        self.options = options
        self.calls = []
        self.response = SimpleNamespace(data=[], count=None)
        self.auth = FakeAuth()
        self.postgrest = FakePostgrest()

    def table(self, name):
        self.calls.append(("table", (name,), {}))
        return FakeQuery(self.calls, self.response)

    def rpc(self, name, params):
        self.calls.append(("rpc", (name, params), {}))
        return FakeQuery(self.calls, self.response)


class FakeFactory:
    def __init__(self):
        self.clients = []

    async def __call__(self, url, key, options=None):
        assert url == BASE
        client = FakeClient(key, options)
        self.clients.append(client)
        return client


def make_remote(service_role_key="service-key"):
    factory = FakeFactory()
    return SupabaseRemote(BASE, "anon-key", service_role_key, timeout=3.0, client_factory=factory), factory


async def data_client(remote, factory, response):
    # Runs one call so the data client exists, then swaps in the canned response.
    await remote.query_table(QuerySpec(table="styles", columns=("id",)))
    client = factory.clients[0]
    client.calls.clear()
    client.response = response
    return client


def test_requires_url_and_key():
    with pytest.raises(ValueError):
        SupabaseRemote("", "anon-key")
    with pytest.raises(ValueError):
        SupabaseRemote(BASE, "")


@pytest.mark.asyncio
async def test_query_maps_onto_the_builder_and_reads_total():
    remote, factory = make_remote()
    client = await data_client(remote, factory, SimpleNamespace(data=[{"id": "a"}], count=25))
    spec = QuerySpec(
        table="wardrobe_items",
        columns=("id", "name"),
        order=(Order("color", ascending=False), Order("id")),
        range=(10, 19),
        count=True,
    )
    spec = (
        spec.where("user_id", "eq", "u1")
        .where("color", "ilike", "%blue%")
        .where("id", "in", ["x", "y"])
        .where("brand", "is", None)
        .where("is_required", "neq", True)
    )
    res = await remote.query_table(spec)

    assert client.calls == [
        ("table", ("wardrobe_items",), {}),
        ("select", ("id,name",), {"count": "exact"}),
        ("eq", ("user_id", "u1"), {}),
        ("ilike", ("color", "%blue%"), {}),
        ("in_", ("id", ["x", "y"]), {}),
        ("is_", ("brand", "null"), {}),
        ("neq", ("is_required", "true"), {}),
        ("order", ("color",), {"desc": True}),
        ("order", ("id",), {"desc": False}),
        ("range", (10, 19), {}),
    ]
    assert res.rows == [{"id": "a"}]
    assert res.count == 25


@pytest.mark.asyncio
async def test_clients_use_the_right_keys_and_options():
    remote, factory = make_remote()
    await remote.query_table(QuerySpec(table="styles", columns=("id",)))
    await remote.introspect_token("good")
    with pytest.raises(RemoteError):
        await remote.admin_create_user("a@b.com", "secret123")

    data, auth, admin = factory.clients
    assert (data.key, auth.key, admin.key) == ("anon-key", "anon-key", "service-key")
    assert data.options.postgrest_client_timeout == 3.0
    assert data.options.persist_session is False
    assert data.options.auto_refresh_token is False

    # Clients are created once and reused.
    await remote.query_table(QuerySpec(table="styles", columns=("id",)))
    assert len(factory.clients) == 3

    await remote.aclose()
    assert data.postgrest.closed


@pytest.mark.asyncio
async def test_writes_project_columns_and_apply_filters():
    remote, factory = make_remote()
    row = {"id": "c1", "name": "Look", "status": "accepted", "user_id": "u1"}
    client = await data_client(remote, factory, SimpleNamespace(data=[row], count=None))

    created = await remote.insert("creations", {"name": "Look"}, columns=("id", "name"))
    assert created == {"id": "c1", "name": "Look"}

    updated = await remote.update(
        "creations",
        {"status": "accepted"},
        [Filter("id", "eq", "c1"), Filter("status", "eq", "pending")],
        columns=("id", "status"),
    )
    assert updated == [{"id": "c1", "status": "accepted"}]
    assert ("update", ({"status": "accepted"},), {}) in client.calls
    assert ("eq", ("status", "pending"), {}) in client.calls

    client.calls.clear()
    await remote.delete("wardrobe_items", [Filter("id", "eq", "w1")])
    assert client.calls == [("table", ("wardrobe_items",), {}), ("delete", (), {}), ("eq", ("id", "w1"), {})]


@pytest.mark.asyncio
async def test_insert_without_representation_is_an_error():
    remote, factory = make_remote()
    await data_client(remote, factory, SimpleNamespace(data=[], count=None))
    with pytest.raises(RemoteError):
        await remote.insert("styles", {"name": "casual"})


@pytest.mark.asyncio
async def test_insert_maps_unique_violation():
    remote, factory = make_remote()
    await data_client(
        remote,
        factory,
        PostgrestAPIError(
            {"code": "23505", "message": "duplicate key value violates unique constraint", "hint": None, "details": None}
        ),
    )
    with pytest.raises(RemoteError) as exc:
        await remote.insert("item_categories", {"name": "top"})
    assert exc.value.is_unique_violation
    assert "duplicate key" in exc.value.message


@pytest.mark.asyncio
async def test_rpc_returns_data_and_transport_failure_becomes_network_error():
    remote, factory = make_remote()
    client = await data_client(remote, factory, SimpleNamespace(data=True, count=None))
    params = {"p_creation_id": "c", "p_item_id": "i"}
    assert await remote.call_function("can_add_to_creation", params) is True
    assert client.calls == [("rpc", ("can_add_to_creation", params), {})]

    client.response = httpx.ConnectError("connection refused")
    with pytest.raises(RemoteError) as exc:
        await remote.call_function("can_add_to_creation", params)
    assert exc.value.code == "network"


@pytest.mark.asyncio
async def test_auth_calls():
    remote, factory = make_remote()
    assert (await remote.introspect_token("good")).id == "u1"
    assert await remote.introspect_token("bad") is None

    created = await remote.create_user("a@b.com", "secret123", {"username": "a_user"})
    assert created.id == "u2"
    assert created.user_metadata == {"username": "a_user"}

    session = await remote.sign_in_with_password("a@b.com", "secret123")
    assert session.access_token == "tok"
    assert session.user.id == "u2"

    auth = factory.clients[0].auth
    assert auth.calls[2] == (
        "sign_up",
        {"email": "a@b.com", "password": "secret123", "options": {"data": {"username": "a_user"}}},
    )

    with pytest.raises(RemoteError) as exc:
        await remote.admin_create_user("a@b.com", "secret123")
    assert exc.value.code == "email_exists"
    assert exc.value.status == 422
    assert "already been registered" in exc.value.message
    assert factory.clients[1].auth.calls == [
        ("admin.create_user", {"email": "a@b.com", "password": "secret123", "email_confirm": True})
    ]


@pytest.mark.asyncio
async def test_admin_create_without_service_key_fails_fast():
    remote, factory = make_remote(service_role_key="")
    with pytest.raises(RemoteError):
        await remote.admin_create_user("a@b.com", "secret123")
    assert factory.clients == []
