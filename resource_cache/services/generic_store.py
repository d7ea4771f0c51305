"""Generic cache engine over one resource directory of the backing store."""

from __future__ import annotations

import asyncio
import contextlib
import functools
import time
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Optional

import structlog
from pydantic import BaseModel

from ..domain.entities import base_info_of
from ..domain.errors import (
    BackingStoreUnavailableError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    SerializationError,
    StoreClosedError,
    StoreError,
    ValidationFailedError,
)
from ..domain.events import EventType, WatchEvent, WatchResponse
from ..domain.models import HubKey, ListInput, ListOutput, StoreState
from ..infra.cache import ConcurrentMap
from ..infra.telemetry import (
    CACHED_OBJECTS,
    STORE_LOAD_SECONDS,
    WATCH_DECODE_FAILURES,
    WATCH_EVENTS_APPLIED,
    WATCH_FAILURES,
)
from ..port.backing_store import BackingStorePort
from ..port.reinit import FailureReporterPort
from ..port.validator import StockCheck, ValidatorPort
from .codec import ObjectCodec
from .validation import ValidationPipeline

logger = structlog.get_logger(__name__)

KEY_SEPARATOR = "/"
DEFAULT_LOAD_TIMEOUT_SECONDS = 5.0

Clock = Callable[[], int]


def unix_now() -> int:
    return int(time.time())


@dataclass(frozen=True, slots=True)
class GenericStoreOption:
    base_path: str
    obj_type: type[BaseModel]
    key_func: Callable[[Any], str]
    hub_key: HubKey
    validator: Optional[ValidatorPort] = None
    stock_check: Optional[StockCheck] = None


def _detached(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_copy(deep=True)
    return obj


def _sort_key(key: str, obj: Any) -> tuple[int, int, str]:
    info = base_info_of(obj)
    if info is None:
        return (0, 0, key)
    return (info.create_time, info.update_time, key)


class GenericStore:
    """Cached, watch-synchronized view of every object under ``base_path``.

    Reads are served from memory only and return copies, so callers cannot
    change cached objects. Writes go to the backing store and show up in the
    cache once the watch stream delivers them.
    """

    def __init__(
        self,
        option: GenericStoreOption,
        backing: BackingStorePort,
        *,
        reinit_registry: Optional[FailureReporterPort] = None,
        load_timeout: float = DEFAULT_LOAD_TIMEOUT_SECONDS,
        clock: Clock = unix_now,
    ) -> None:
        if not option.base_path or not option.base_path.strip(KEY_SEPARATOR):
            logger.error("base path empty")
            raise ConfigurationError("base path can not be empty")
        if option.obj_type is None:
            logger.error("object type is nil")
            raise ConfigurationError("object type can not be nil")
        if not (isinstance(option.obj_type, type) and issubclass(option.obj_type, BaseModel)):
            logger.error("obj type is invalid", obj_type=repr(option.obj_type))
            raise ConfigurationError("obj type is invalid")
        if option.key_func is None:
            logger.error("key func is nil")
            raise ConfigurationError("key func can not be nil")

        self._opt = option
        self._base_path = option.base_path.rstrip(KEY_SEPARATOR)
        self._backing = backing
        self._reinit_registry = reinit_registry
        self._load_timeout = load_timeout
        self._clock = clock
        self._codec = ObjectCodec(option.obj_type)
        self._cache: ConcurrentMap[str, Any] = ConcurrentMap()
        self._pipeline = ValidationPipeline(
            self._cache, validator=option.validator, stock_check=option.stock_check
        )
        self._init_lock = asyncio.Lock()
        self._watch_task: asyncio.Task | None = None
        self._closing = False
        self._state = StoreState.UNINITIALIZED

    def type(self) -> HubKey:
        return self._opt.hub_key

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is StoreState.CLOSED

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def obj_type(self) -> type[BaseModel]:
        return self._opt.obj_type

    # --- Lifecycle ---

    async def init(self) -> None:
        async with self._init_lock:
            if self.closed:
                raise StoreClosedError(f"store {self.type().value} is closed")
            if self._state is StoreState.WATCHING and self._watch_alive():
                return
            await self._list_and_watch()

    async def close(self) -> None:
        self._closing = True
        self._state = StoreState.CLOSED
        task, self._watch_task = self._watch_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.info("store closed", resource=self.type().value)

    def _watch_alive(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    def _restore_state(self, previous: StoreState) -> None:
        if not self.closed:
            self._state = previous

    async def _list_and_watch(self) -> None:
        previous = self._state
        self._state = (
            StoreState.LOADING if previous is StoreState.UNINITIALIZED else StoreState.REINITIALIZING
        )
        prefix = self._base_path + KEY_SEPARATOR
        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(self._backing.list(prefix), timeout=self._load_timeout)
            loaded: dict[str, Any] = {}
            for item in result.items:
                key = item.key[len(prefix):]
                obj = self._codec.decode(item.value, key)
                loaded[self.key_of(obj)] = obj
        except asyncio.TimeoutError as exc:
            self._restore_state(previous)
            logger.error("list timed out", resource=self.type().value, timeout=self._load_timeout)
            raise BackingStoreUnavailableError(
                f"listing {prefix} timed out after {self._load_timeout}s"
            ) from exc
        except SerializationError:
            self._restore_state(previous)
            logger.error(
                "error occurred while initializing logical store",
                resource=self.type().value,
                base_path=self._base_path,
            )
            raise
        except StoreError:
            self._restore_state(previous)
            raise
        except Exception as exc:
            self._restore_state(previous)
            raise BackingStoreUnavailableError(f"listing {prefix} failed: {exc}") from exc

        if self._closing:
            logger.info("store closed while loading", resource=self.type().value)
            raise StoreClosedError(f"store {self.type().value} is closed")

        self._cache.replace_all(loaded)
        CACHED_OBJECTS.labels(resource=self.type().value).set(len(loaded))
        STORE_LOAD_SECONDS.labels(resource=self.type().value).observe(time.perf_counter() - started)

        stream = self._backing.watch(prefix, start_revision=result.revision + 1)
        self._watch_task = asyncio.create_task(
            self._consume_watch(stream), name=f"watch:{self.type().value}"
        )
        self._state = StoreState.WATCHING
        logger.info(
            "store initialized",
            resource=self.type().value,
            objects=len(loaded),
            revision=result.revision,
        )

    # --- Watch ---

    async def _consume_watch(self, stream: AsyncIterator[WatchResponse]) -> None:
        try:
            async with contextlib.aclosing(stream):
                async for response in stream:
                    if response.canceled:
                        logger.warning(
                            "watch failed", resource=self.type().value, error=response.error
                        )
                        return
                    for event in response.events:
                        self._apply_event(event)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.error(
                "watch stream raised",
                resource=self.type().value,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
        finally:
            if not self._closing:
                logger.error(
                    "watch exception closed, restarting", resource=self.type().value
                )
                WATCH_FAILURES.labels(resource=self.type().value).inc()
                self._state = StoreState.REINITIALIZING
                if self._reinit_registry is not None:
                    self._reinit_registry.report_failure(self)

    def _apply_event(self, event: WatchEvent) -> None:
        key = event.key[len(self._base_path) + 1:]
        resource = self.type().value
        if event.type is EventType.PUT:
            try:
                obj = self._codec.decode(event.value, key)
            except SerializationError as exc:
                logger.warning("value convert to obj failed", resource=resource, key=key, error=str(exc))
                WATCH_DECODE_FAILURES.labels(resource=resource).inc()
                return
            self._cache.set(key, obj)
        elif event.type is EventType.DELETE:
            self._cache.delete(key)
        WATCH_EVENTS_APPLIED.labels(resource=resource, type=event.type.value).inc()
        CACHED_OBJECTS.labels(resource=resource).set(len(self._cache))

    # --- Reads ---

    def get(self, key: str) -> Any:
        obj = self._cache.get(key)
        if obj is None:
            logger.warning("data not found by key", resource=self.type().value, key=key)
            raise NotFoundError(key)
        return _detached(obj)

    def list(self, input: Optional[ListInput] = None) -> ListOutput:
        input = input or ListInput()
        entries: list[tuple[str, Any, Any]] = []
        for key, value in self._cache.items():
            copy = _detached(value)
            if input.predicate is not None and not input.predicate(copy):
                continue
            row = input.format(copy) if input.format is not None else copy
            entries.append((key, value, row))

        if input.less is None:
            entries.sort(key=lambda entry: _sort_key(entry[0], entry[1]))
        else:
            less = input.less

            def compare(a: tuple[str, Any, Any], b: tuple[str, Any, Any]) -> int:
                if less(a[2], b[2]):
                    return -1
                if less(b[2], a[2]):
                    return 1
                return 0

            entries.sort(key=functools.cmp_to_key(compare))

        rows = [entry[2] for entry in entries]
        total = len(rows)
        if input.page_size > 0 and input.page_number > 0:
            skip = (input.page_number - 1) * input.page_size
            rows = [] if skip > total else rows[skip:skip + input.page_size]
        return ListOutput(rows=rows, total_size=total)

    def range(self, visitor: Callable[[str, Any], bool]) -> None:
        self._cache.range(lambda key, value: visitor(key, _detached(value)))

    # --- Writes ---

    def storage_key(self, key: str) -> str:
        return f"{self._base_path}{KEY_SEPARATOR}{key}"

    def key_of(self, obj: Any) -> str:
        key = self._opt.key_func(obj)
        return "" if key is None else str(key)

    def _object_key(self, obj: Any) -> str:
        key = self.key_of(obj)
        if not key:
            raise ValidationFailedError("key is required")
        if KEY_SEPARATOR in key:
            raise ValidationFailedError(f"key: {key} must not contain {KEY_SEPARATOR!r}")
        return key

    def _check_obj(self, obj: Any) -> None:
        if not isinstance(obj, self._opt.obj_type):
            raise ValidationFailedError(
                f"expected {self._opt.obj_type.__name__}, got {type(obj).__name__}"
            )

    async def create(self, obj: Any) -> Any:
        self._check_obj(obj)
        info = base_info_of(obj)
        if info is not None:
            info.creating(self._clock())

        self._pipeline.run(obj)

        key = self._object_key(obj)
        if key in self._cache:
            logger.warning("key is conflicted", resource=self.type().value, key=key)
            raise ConflictError(f"key: {key} is conflicted")

        payload = self._codec.encode(obj, key)
        await self._write(self._backing.create, self.storage_key(key), payload)
        return obj

    async def update(self, obj: Any, create_if_missing: bool = False) -> Any:
        self._check_obj(obj)
        self._pipeline.run(obj)

        key = self._object_key(obj)
        stored = self._cache.get(key)
        if stored is None:
            if create_if_missing:
                return await self.create(obj)
            logger.warning("key is not found", resource=self.type().value, key=key)
            raise NotFoundError(key)

        info = base_info_of(obj)
        stored_info = base_info_of(stored)
        if info is not None and stored_info is not None:
            info.updating(stored_info, self._clock())

        payload = self._codec.encode(obj, key)
        await self._write(self._backing.update, self.storage_key(key), payload)
        return obj

    async def batch_delete(self, keys: list[str]) -> None:
        storage_keys: list[str] = []
        for key in keys:
            if not key or KEY_SEPARATOR in key:
                raise ValidationFailedError(f"invalid key: {key!r}")
            storage_keys.append(self.storage_key(key))
        if not storage_keys:
            return
        try:
            await self._backing.batch_delete(storage_keys)
        except StoreError:
            raise
        except Exception as exc:
            raise BackingStoreUnavailableError(f"batch delete failed: {exc}") from exc

    async def _write(self, op: Callable[[str, bytes], Any], storage_key: str, payload: bytes) -> None:
        try:
            await op(storage_key, payload)
        except StoreError:
            raise
        except Exception as exc:
            logger.error(
                "backing store write failed",
                resource=self.type().value,
                key=storage_key,
                error=str(exc),
            )
            raise BackingStoreUnavailableError(f"write {storage_key} failed: {exc}") from exc
