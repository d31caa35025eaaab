from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from socialdash.api.v1 import health
from socialdash.main import app

client = TestClient(app)


class FakeAsyncRedis:
    """Асинхронный клиент Redis без сети; запоминает вызовы."""

    instances: list["FakeAsyncRedis"] = []

    def __init__(self, url: str, reachable: bool = True) -> None:
        self.url = url
        self.reachable = reachable
        self.pinged = False
        self.closed = False

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "FakeAsyncRedis":
        instance = cls(url)
        cls.instances.append(instance)
        return instance

    async def ping(self) -> bool:
        self.pinged = True
        if not self.reachable:
            raise RedisConnectionError("connection refused")
        return True

    async def aclose(self) -> None:
        self.closed = True


def test_healthz_ok(monkeypatch):
    async def up() -> bool:
        return True

    monkeypatch.setattr(health, "_ping_broker", up)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"environment": "test", "db": "memory", "broker": "ok"}


def test_healthz_broker_down(monkeypatch):
    async def down() -> bool:
        raise RedisConnectionError("connection refused")

    monkeypatch.setattr(health, "_ping_broker", down)
    response = client.get("/healthz")
    assert response.status_code == 500
    assert response.json()["detail"] == "broker error"


def test_broker_ping_is_awaited_and_client_closed(monkeypatch):
    FakeAsyncRedis.instances = []
    monkeypatch.setattr(health, "Redis", FakeAsyncRedis)

    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["broker"] == "ok"
    [redis_client] = FakeAsyncRedis.instances
    assert redis_client.pinged and redis_client.closed


def test_unreachable_broker_still_closes_client(monkeypatch):
    class Unreachable(FakeAsyncRedis):
        def __init__(self, url: str) -> None:
            super().__init__(url, reachable=False)

    FakeAsyncRedis.instances = []
    monkeypatch.setattr(health, "Redis", Unreachable)

    response = client.get("/healthz")

    assert response.status_code == 500
    [redis_client] = FakeAsyncRedis.instances
    assert redis_client.closed
