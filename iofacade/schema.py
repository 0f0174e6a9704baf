"""Declarative view of backend config models.

``describe_config`` flattens a pydantic config model into typed field
descriptors, so front-ends can render or prompt for backend settings
without knowing the model class.
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from typing import Any, Literal, Union, get_args, get_origin

from pydantic import BaseModel, SecretStr

from iofacade.errors import ConfigurationError

FieldKind = Literal[
    "string",
    "int",
    "double",
    "bool",
    "string_array",
    "int_array",
    "double_array",
    "password",
    "nested",
]

_SCALAR_KINDS: dict[type, FieldKind] = {
    str: "string",
    bool: "bool",
    int: "int",
    float: "double",
    SecretStr: "password",
}

_ARRAY_KINDS: dict[type, FieldKind] = {
    str: "string_array",
    int: "int_array",
    float: "double_array",
}


@dataclass(frozen=True)
class ConfigField:
    name: str
    kind: FieldKind
    default: Any = None
    optional: bool = False  # accepts None
    required: bool = False  # has no default
    description: str | None = None
    fields: tuple[ConfigField, ...] = ()  # only for "nested"


def describe_config(config_type: type[BaseModel]) -> list[ConfigField]:
    """Describe every field of ``config_type``.

    Raises:
        ConfigurationError: If a field type has no descriptor kind
    """
    result = []
    for name, info in config_type.model_fields.items():
        annotation = _strip_optional(info.annotation)
        kind = _classify(config_type, name, annotation)
        default = None if info.is_required() else info.get_default(call_default_factory=True)
        if kind == "password":
            # never expose secrets through the schema
            default = None
        elif kind == "nested" and isinstance(default, BaseModel):
            default = default.model_dump()
        result.append(
            ConfigField(
                name=info.alias or name,
                kind=kind,
                default=default,
                optional=_admits_none(info.annotation),
                required=info.is_required(),
                description=info.description,
                fields=tuple(describe_config(annotation)) if kind == "nested" else (),
            )
        )
    return result


def _admits_none(annotation: Any) -> bool:
    if annotation is None or annotation is type(None):
        return True
    return get_origin(annotation) in (Union, types.UnionType) and type(None) in get_args(annotation)


def _strip_optional(annotation: Any) -> Any:
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _classify(config_type: type[BaseModel], name: str, annotation: Any) -> FieldKind:
    if annotation in _SCALAR_KINDS:
        return _SCALAR_KINDS[annotation]
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return "nested"
    if get_origin(annotation) in (list, tuple):
        args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
        if len(args) == 1 and args[0] in _ARRAY_KINDS:
            return _ARRAY_KINDS[args[0]]
    raise ConfigurationError(f"Unsupported type for config field {config_type.__name__}.{name}: {annotation!r}")
