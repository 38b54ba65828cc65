from dataclasses import dataclass, field
from typing import Any

import pytest

from app.consultant.schemas import ConversationTurn
from app.infrastructure import InMemorySessionStore, RedisSessionStore


@pytest.mark.asyncio
async def test_in_memory_store_evicts_oldest_turns() -> None:
    store = InMemorySessionStore(max_turns=3)
    for i in range(5):
        await store.append("c1", ConversationTurn.user(f"m{i}"))

    turns = await store.load("c1")

    assert [t.text for t in turns] == ["m2", "m3", "m4"]


@pytest.mark.asyncio
async def test_in_memory_store_isolates_chats_and_clears() -> None:
    store = InMemorySessionStore()
    await store.append("c1", ConversationTurn.user("a"), ConversationTurn.assistant("b"))
    await store.append("c2", ConversationTurn.user("x"))

    await store.clear("c1")

    assert await store.load("c1") == []
    assert [t.text for t in await store.load("c2")] == ["x"]


@pytest.mark.asyncio
async def test_in_memory_store_evicts_least_recently_active_chat() -> None:
    store = InMemorySessionStore(max_chats=2)
    await store.append("c1", ConversationTurn.user("a"))
    await store.append("c2", ConversationTurn.user("b"))
    await store.append("c1", ConversationTurn.user("c"))
    await store.append("c3", ConversationTurn.user("d"))

    assert len(store) == 2
    assert await store.load("c2") == []
    assert [t.text for t in await store.load("c1")] == ["a", "c"]


@pytest.mark.asyncio
async def test_in_memory_store_drops_idle_chats() -> None:
    now = [0.0]
    store = InMemorySessionStore(ttl_seconds=60, clock=lambda: now[0])
    await store.append("idle", ConversationTurn.user("a"))
    now[0] = 30.0
    await store.append("active", ConversationTurn.user("b"))

    now[0] = 70.0

    assert await store.load("idle") == []
    assert [t.text for t in await store.load("active")] == ["b"]
    assert len(store) == 1


@dataclass
class FakePipeline:
    client: "FakeRedis"
    ops: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None

    def rpush(self, key: str, *values: str) -> None:
        self.ops.append(("rpush", (key, *values)))

    def ltrim(self, key: str, start: int, end: int) -> None:
        self.ops.append(("ltrim", (key, start, end)))

    def expire(self, key: str, ttl: int) -> None:
        self.ops.append(("expire", (key, ttl)))

    async def execute(self) -> None:
        for name, args in self.ops:
            key = args[0]
            if name == "rpush":
                self.client.lists.setdefault(key, []).extend(args[1:])
            elif name == "ltrim":
                items = self.client.lists.get(key, [])
                self.client.lists[key] = items[args[1]:] if args[2] == -1 else items[args[1]:args[2] + 1]
            else:
                self.client.ttls[key] = args[1]
        self.client.executed.append([name for name, _ in self.ops])


@dataclass
class FakeRedis:
    lists: dict[str, list[str]] = field(default_factory=dict)
    ttls: dict[str, int] = field(default_factory=dict)
    executed: list[list[str]] = field(default_factory=list)

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)

    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        return list(self.lists.get(key, []))

    async def delete(self, key: str) -> None:
        self.lists.pop(key, None)


@pytest.mark.asyncio
async def test_redis_store_trims_and_refreshes_ttl_in_one_transaction() -> None:
    store = RedisSessionStore(max_turns=2, ttl_seconds=60)
    fake = FakeRedis()
    store.redis_client = fake  # type: ignore[assignment]

    await store.append("c1", ConversationTurn.user("a"), ConversationTurn.assistant("b"))
    await store.append("c1", ConversationTurn.user("c"))

    assert [t.text for t in await store.load("c1")] == ["b", "c"]
    assert fake.ttls == {"chat:c1:turns": 60}
    assert fake.executed[-1] == ["rpush", "ltrim", "expire"]

    await store.clear("c1")
    assert await store.load("c1") == []


@pytest.mark.asyncio
async def test_redis_store_requires_connection() -> None:
    with pytest.raises(RuntimeError):
        await RedisSessionStore().load("c1")
