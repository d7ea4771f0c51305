"""Unit tests for resource schemas and the BaseInfo capability."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, ValidationError

from resource_cache.domain.entities import (
    BaseInfo,
    Consumer,
    Route,
    User,
    base_info_of,
)


class TestBaseInfo:
    def test_creating_generates_id_and_stamps_times(self):
        route = Route(uri="/a")
        route.creating(100)

        assert isinstance(route.id, str) and len(route.id) == 32
        assert route.create_time == route.update_time == 100

    def test_creating_keeps_given_id_as_string(self):
        route = Route(id=42, uri="/a")
        route.creating(100)
        assert route.id == "42"

    def test_creating_replaces_empty_id(self):
        route = Route(id="", uri="/a")
        route.creating(100)
        assert route.id

    def test_updating_keeps_identity_and_never_goes_back(self):
        stored = Route(id="r1", create_time=10, update_time=500)
        candidate = Route(id="other", create_time=0, update_time=0)

        candidate.updating(stored, 200)

        assert candidate.id == "r1"
        assert candidate.create_time == 10
        assert candidate.update_time == 500

    def test_key_compat_only_fills_missing_id(self):
        route = Route()
        route.key_compat("from-key")
        assert route.id == "from-key"

        route.key_compat("other")
        assert route.id == "from-key"

    def test_base_info_of(self):
        route = Route()
        assert base_info_of(route) is route

        class Plain(BaseModel):
            name: str = "x"

        assert base_info_of(Plain()) is None
        assert base_info_of({"id": 1}) is None

    def test_timestamps_must_be_non_negative(self):
        with pytest.raises(ValidationError):
            BaseInfo(create_time=-1)


class TestSchemas:
    def test_route_rejects_uri_and_uris(self):
        with pytest.raises(ValidationError):
            Route(uri="/a", uris=["/b"])

    def test_route_rejects_host_and_hosts(self):
        with pytest.raises(ValidationError):
            Route(host="a.com", hosts=["b.com"])

    def test_consumer_username_pattern(self):
        Consumer(username="jack_01")
        with pytest.raises(ValidationError):
            Consumer(username="jack-01")

    def test_user_requires_name(self):
        with pytest.raises(ValidationError):
            User()

    def test_get_plugins_defaults_to_empty(self):
        assert Route().get_plugins() == {}
        assert Consumer(username="a", plugins={"key-auth": {}}).get_plugins() == {"key-auth": {}}
