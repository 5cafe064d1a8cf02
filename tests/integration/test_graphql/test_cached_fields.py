"""End-to-end tests for cached fields on a strawberry schema.

Tests cover:
- ``{ user { name } }`` caches under ``user:1:name``
- Custom identifying attribute via cache_key_field()
- Private fields fenced per principal
- Custom cache values from the registry
- Key errors reported against the one field
- Requests without an interceptor resolve uncached
"""

from collections import Counter
from dataclasses import dataclass
from typing import Optional

import pytest
import strawberry

from graph_cache_service.core.schemas.auth import AuthUser
from graph_cache_service.features.graphql.caching import (
    CacheExtension,
    CacheInterceptor,
    CacheStrategyRegistry,
    cache_key_field,
)
from graph_cache_service.features.graphql.context import GraphQLContext

calls: Counter = Counter()


@strawberry.type
class User:
    id: strawberry.ID

    @strawberry.field(extensions=[CacheExtension()])
    async def name(self) -> str:
        calls["name"] += 1
        return "foobar"

    @strawberry.field(extensions=[CacheExtension(private=True)])
    async def inbox(self, info: strawberry.Info) -> str:
        calls["inbox"] += 1
        return f"inbox of {info.context.principal_id}"


@strawberry.type(name="User")
class EmailUser:
    id: strawberry.ID
    email: str = cache_key_field()

    @strawberry.field(extensions=[CacheExtension()])
    async def name(self) -> str:
        calls["email_name"] += 1
        return "foobar"


@strawberry.type
class Anonymous:
    label: str

    @strawberry.field(extensions=[CacheExtension()])
    async def greeting(self) -> Optional[str]:
        calls["greeting"] += 1
        return "hello"


@strawberry.type
class Ghost:
    id: Optional[strawberry.ID]

    @strawberry.field(extensions=[CacheExtension()])
    async def name(self) -> Optional[str]:
        return "boo"


@strawberry.type
class Query:
    @strawberry.field
    def user(self) -> User:
        return User(id=strawberry.ID("1"))

    @strawberry.field
    def anonymous(self) -> Anonymous:
        return Anonymous(label="visitor")

    @strawberry.field
    def ghost(self) -> Ghost:
        return Ghost(id=None)


@strawberry.type
class EmailQuery:
    @strawberry.field
    def user(self) -> EmailUser:
        return EmailUser(id=strawberry.ID("1"), email="foo@bar.com")


schema = strawberry.Schema(query=Query)
email_schema = strawberry.Schema(query=EmailQuery)


@dataclass(frozen=True)
class FixedKey:
    key: str

    def get_key(self) -> str:
        return self.key

    def is_private(self) -> bool:
        return False


@pytest.fixture(autouse=True)
def _reset_calls():
    calls.clear()


@pytest.mark.integration
class TestCachedFields:
    """Cached fields resolved through a schema."""

    @pytest.mark.asyncio
    async def test_user_name_cached(self, graphql_context, memory_store):
        first = await schema.execute("{ user { name } }", context_value=graphql_context)
        second = await schema.execute("{ user { name } }", context_value=graphql_context)

        assert first.errors is None
        assert first.data == second.data == {"user": {"name": "foobar"}}
        assert await memory_store.get("user:1:name") == "foobar"
        assert calls["name"] == 1

    @pytest.mark.asyncio
    async def test_custom_identifying_attribute(self, graphql_context, memory_store):
        result = await email_schema.execute("{ user { name } }", context_value=graphql_context)

        assert result.errors is None
        assert await memory_store.get("user:foo@bar.com:name") == "foobar"
        assert await memory_store.get("user:1:name") is None

    @pytest.mark.asyncio
    async def test_private_field_keyed_by_principal(self, interceptor, memory_store):
        alice = GraphQLContext(field_cache=interceptor, user=AuthUser(user_id="alice"))
        bob = GraphQLContext(field_cache=interceptor, user=AuthUser(user_id="bob"))

        alice_result = await schema.execute("{ user { inbox } }", context_value=alice)
        bob_result = await schema.execute("{ user { inbox } }", context_value=bob)
        await schema.execute("{ user { inbox } }", context_value=alice)

        assert alice_result.data == {"user": {"inbox": "inbox of alice"}}
        assert bob_result.data == {"user": {"inbox": "inbox of bob"}}
        assert await memory_store.get("auth:alice:user:1:inbox") == "inbox of alice"
        assert await memory_store.get("auth:bob:user:1:inbox") == "inbox of bob"
        assert calls["inbox"] == 2

    @pytest.mark.asyncio
    async def test_private_field_without_principal(self, graphql_context, memory_store):
        await schema.execute("{ user { inbox } }", context_value=graphql_context)

        assert await memory_store.get("auth:none:user:1:inbox") == "inbox of None"
        assert await memory_store.get("user:1:inbox") is None

    @pytest.mark.asyncio
    async def test_custom_cache_value(self, memory_store):
        interceptor = CacheInterceptor(memory_store, CacheStrategyRegistry(lambda context: FixedKey("foo")))

        result = await schema.execute("{ user { name } }", context_value=GraphQLContext(field_cache=interceptor))

        assert result.errors is None
        assert await memory_store.get("foo") == "foobar"
        assert memory_store.keys() == ["foo"]

    @pytest.mark.asyncio
    async def test_missing_identifying_attribute_is_field_error(self, graphql_context, memory_store):
        result = await schema.execute("{ anonymous { label greeting } }", context_value=graphql_context)

        assert result.data == {"anonymous": {"label": "visitor", "greeting": None}}
        assert len(result.errors) == 1
        assert "identifying attribute" in result.errors[0].message
        assert result.errors[0].path == ["anonymous", "greeting"]
        assert calls["greeting"] == 0
        assert memory_store.keys() == []

    @pytest.mark.asyncio
    async def test_null_identity_is_field_error(self, graphql_context, memory_store):
        result = await schema.execute("{ ghost { name } }", context_value=graphql_context)

        assert result.data == {"ghost": {"name": None}}
        assert "resolved to null" in result.errors[0].message
        assert memory_store.keys() == []

    @pytest.mark.asyncio
    async def test_without_interceptor_resolves_uncached(self):
        context = GraphQLContext()

        await schema.execute("{ user { name } }", context_value=context)
        result = await schema.execute("{ user { name } }", context_value=context)

        assert result.data == {"user": {"name": "foobar"}}
        assert calls["name"] == 2

    @pytest.mark.asyncio
    async def test_store_failure_degrades(self, failing_store):
        context = GraphQLContext(field_cache=CacheInterceptor(failing_store))

        result = await schema.execute("{ user { name } }", context_value=context)

        assert result.errors is None
        assert result.data == {"user": {"name": "foobar"}}
