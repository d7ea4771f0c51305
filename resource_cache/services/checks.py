"""Cross-object checks shared by resource stores and handlers."""

from __future__ import annotations

from typing import Any, Optional

from ..domain.entities import base_info_of
from ..domain.errors import ConflictError
from ..domain.models import ListInput
from ..port.validator import StockCheck


def _same_object(obj: Any, stock_obj: Any) -> bool:
    info = base_info_of(obj)
    stock_info = base_info_of(stock_obj)
    if info is None or stock_info is None or info.id is None:
        return False
    return str(info.id) == str(stock_info.id)


def unique_field(field: str, label: Optional[str] = None) -> StockCheck:
    """Stock check rejecting a second object with the same ``field`` value."""

    label = label or field

    def check(obj: Any, stock_obj: Any) -> None:
        value = getattr(obj, field, None)
        if value is None or _same_object(obj, stock_obj):
            return
        if getattr(stock_obj, field, None) == value:
            raise ConflictError(f"{label} is duplicated: {value}")

    return check


def unique_plugin_credential(plugin: str, attribute: str = "key") -> StockCheck:
    """Stock check: no two objects share ``plugins[plugin][attribute]``."""

    def credential(obj: Any) -> Any:
        plugins: dict[str, Any] = obj.get_plugins() if hasattr(obj, "get_plugins") else {}
        conf = plugins.get(plugin)
        if not isinstance(conf, dict):
            return None
        return conf.get(attribute)

    def check(obj: Any, stock_obj: Any) -> None:
        value = credential(obj)
        if value is None or _same_object(obj, stock_obj):
            return
        if getattr(obj, "username", None) is not None and getattr(obj, "username") == getattr(
            stock_obj, "username", None
        ):
            return
        if credential(stock_obj) == value:
            raise ConflictError(f"duplicate {plugin} {attribute} found")

    return check


def name_exist_check(
    store: Any,
    name: str,
    exclude_id: Optional[str] = None,
    *,
    field: str = "name",
    label: str = "object",
) -> None:
    """Raise ConflictError when another object in ``store`` already uses ``name``."""

    def predicate(obj: Any) -> bool:
        if getattr(obj, field, None) != name:
            return False
        info = base_info_of(obj)
        if exclude_id is not None and info is not None and str(info.id) == str(exclude_id):
            return False
        return True

    output = store.list(ListInput(predicate=predicate, page_size=1, page_number=1))
    if output.total_size > 0:
        raise ConflictError(f"{label} name exists: {name}")


def key_by_id(obj: Any) -> str:
    info = base_info_of(obj)
    if info is None or info.id is None:
        return ""
    return str(info.id)
