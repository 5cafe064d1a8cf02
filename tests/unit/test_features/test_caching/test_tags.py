"""Tests for invalidation tag computation."""

from __future__ import annotations

import pytest

from graph_cache_service.features.graphql.caching import (
    EntityReference,
    entity_tag,
    field_tag,
    tags_for,
)


@pytest.mark.unit
class TestTags:
    """Test suite for tag helpers."""

    def test_entity_field_tags(self):
        tags = tags_for(EntityReference.for_entity("User", 1), "posts")
        assert tags == ("graphql:user:1", "graphql:user:1:posts")

    def test_root_fields_untagged(self):
        assert tags_for(EntityReference.for_root(), "users") == ()

    def test_custom_prefix(self):
        assert entity_tag("User", 1, "app") == "app:user:1"
        assert field_tag("User", 1, "name", "app") == "app:user:1:name"

    def test_type_name_lowercased(self):
        assert entity_tag("BlogPost", "a1") == "graphql:blogpost:a1"
