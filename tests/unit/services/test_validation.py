"""Unit tests for the validation pipeline and built-in checks."""

from __future__ import annotations

import pytest

from resource_cache.domain.entities import Consumer, Route, User
from resource_cache.domain.errors import ConflictError, ValidationFailedError
from resource_cache.infra.cache import ConcurrentMap
from resource_cache.services.checks import (
    key_by_id,
    unique_field,
    unique_plugin_credential,
)
from resource_cache.services.validation import ModelValidator, ValidationPipeline


class TestModelValidator:
    def test_valid_model_passes(self):
        ModelValidator().validate(Route(uri="/a"))

    def test_mutated_model_is_revalidated(self):
        route = Route(uri="/a")
        route.uris = ["/b"]

        with pytest.raises(ValidationFailedError):
            ModelValidator().validate(route)

    def test_non_model_is_rejected(self):
        with pytest.raises(ValidationFailedError):
            ModelValidator().validate({"uri": "/a"})


class TestValidationPipeline:
    def test_no_validators_accepts_anything(self):
        ValidationPipeline(ConcurrentMap()).run(Route(uri="/a"))

    def test_stock_check_sees_every_cached_object(self):
        cache: ConcurrentMap[str, Route] = ConcurrentMap()
        for index in range(3):
            cache.set(str(index), Route(id=str(index)))
        seen: list[str] = []

        ValidationPipeline(cache, stock_check=lambda obj, stock: seen.append(stock.id)).run(Route())

        assert sorted(seen) == ["0", "1", "2"]

    def test_first_stock_failure_aborts_scan(self):
        cache: ConcurrentMap[str, Route] = ConcurrentMap()
        for index in range(3):
            cache.set(str(index), Route(id=str(index)))
        calls: list[str] = []

        def check(obj, stock):
            calls.append(stock.id)
            raise ConflictError("taken")

        with pytest.raises(ConflictError):
            ValidationPipeline(cache, stock_check=check).run(Route())
        assert len(calls) == 1

    def test_validator_runs_before_stock_check(self):
        class Reject:
            def validate(self, obj):
                raise ValidationFailedError("bad")

        called = []
        cache: ConcurrentMap[str, Route] = ConcurrentMap()
        cache.set("x", Route(id="x"))

        with pytest.raises(ValidationFailedError):
            ValidationPipeline(
                cache, validator=Reject(), stock_check=lambda o, s: called.append(s)
            ).run(Route())
        assert called == []


class TestChecks:
    def test_unique_field_rejects_duplicate_name(self):
        check = unique_field("name", label="user name")
        with pytest.raises(ConflictError, match="user name is duplicated"):
            check(User(name="alice"), User(id="1", name="alice"))

    def test_unique_field_ignores_same_object(self):
        unique_field("name")(User(id="1", name="alice"), User(id="1", name="alice"))

    def test_unique_plugin_credential(self):
        check = unique_plugin_credential("key-auth")
        stock = Consumer(username="jack", plugins={"key-auth": {"key": "secret"}})

        with pytest.raises(ConflictError):
            check(Consumer(username="rose", plugins={"key-auth": {"key": "secret"}}), stock)

        check(Consumer(username="jack", plugins={"key-auth": {"key": "secret"}}), stock)
        check(Consumer(username="rose", plugins={"key-auth": {"key": "other"}}), stock)
        check(Consumer(username="rose"), stock)

    def test_key_by_id(self):
        assert key_by_id(Route(id=7)) == "7"
        assert key_by_id(Route()) == ""
