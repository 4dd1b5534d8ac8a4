"""记录值工具：对类 JSON 的嵌套结构做类型化的读取、路径更新与合并。

记录值只有三种形态（见 ``ValueKind``）：对象（字符串键映射）、数组、标量。
路径更新按层递归下降，每一层都复制后再修改，调用方传入的原始结构保持不变。
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from copy import deepcopy
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Union

Scalar = Union[str, int, float, bool, datetime, date, time, None]
PathKey = Union[str, int]

_MISSING = object()


class ValueKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    SCALAR = "scalar"


def kind_of(value: Any) -> ValueKind:
    """判断值属于哪一种形态，非法类型抛出 ``TypeError``。"""
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return ValueKind.ARRAY
    if value is None or isinstance(value, (str, int, float, bool, datetime, date, time)):
        return ValueKind.SCALAR
    raise TypeError(f"Unsupported record value type: {type(value).__name__}")


def parse_path(raw: str | Sequence[PathKey]) -> list[PathKey]:
    """将 ``"hero.items.0.title"`` 解析为 ``["hero", "items", 0, "title"]``。

    纯数字片段解析为整数：在数组层作下标，在对象层按字符串键处理；已是序列时原样复制返回。
    """
    if not isinstance(raw, str):
        return list(raw)
    text = raw.strip()
    if not text:
        raise ValueError("Path must not be empty")
    keys: list[PathKey] = []
    for part in text.split("."):
        if part == "":
            raise ValueError(f"Invalid path: {raw!r}")
        keys.append(int(part) if part.isdigit() else part)
    return keys


def _object_key(key: PathKey) -> str:
    """对象层的键一律按字符串处理，``"404"`` 这类数字键也能寻址。"""
    return str(key)


def get_path(value: Any, path: str | Sequence[PathKey], default: Any = None) -> Any:
    current = value
    for key in parse_path(path):
        kind = kind_of(current)
        if kind is ValueKind.OBJECT:
            current = current.get(_object_key(key), _MISSING)
        elif kind is ValueKind.ARRAY and isinstance(key, int) and 0 <= key < len(current):
            current = current[key]
        else:
            return default
        if current is _MISSING:
            return default
    return current


def set_path(value: Any, path: str | Sequence[PathKey], new_value: Any) -> Any:
    """返回在 ``path`` 处写入 ``new_value`` 后的新结构。

    - 对象层缺失的键会自动补成空对象；
    - 数组层只允许覆盖已有下标或在末尾追加（下标等于长度）；
    - 路径穿过标量时抛出 ``TypeError``。
    """
    keys = parse_path(path)
    kind_of(new_value)
    return _set(value, keys, new_value)


def _set(node: Any, keys: list[PathKey], new_value: Any) -> Any:
    if not keys:
        return deepcopy(new_value)
    key, rest = keys[0], keys[1:]
    kind = kind_of(node) if node is not None else ValueKind.OBJECT

    if kind is ValueKind.OBJECT:
        key = _object_key(key)
        updated = dict(node or {})
        updated[key] = _set(updated.get(key), rest, new_value)
        return updated

    if kind is ValueKind.ARRAY:
        if not isinstance(key, int):
            raise TypeError(f"Array level expects an integer index, got {key!r}")
        updated_list = list(node)
        if key == len(updated_list):
            updated_list.append(_set(None, rest, new_value))
        elif 0 <= key < len(updated_list):
            updated_list[key] = _set(updated_list[key], rest, new_value)
        else:
            raise IndexError(f"Array index {key} out of range")
        return updated_list

    raise TypeError(f"Cannot descend into scalar at {key!r}")


def merge_sections(defaults: Mapping[str, Any], current: Mapping[str, Any]) -> dict[str, Any]:
    """按“分节”合并默认值：只合并一层，已有值优先。

    默认值中的每个分节若为对象，则与当前值的同名分节做浅合并；
    当前值中额外的分节原样保留，分节内部的嵌套对象不再递归合并。
    """
    merged: dict[str, Any] = deepcopy(dict(defaults))
    for section, value in current.items():
        base = merged.get(section)
        if isinstance(base, Mapping) and isinstance(value, Mapping):
            merged[section] = {**base, **deepcopy(dict(value))}
        else:
            merged[section] = deepcopy(value)
    return merged
