"""Field plans — the per-class view of a record the encoder walks.

A record is a dataclass instance or a pydantic model instance. For each
record class a tuple of :class:`FieldPlan` is built once from the class
definition and cached, so tags are never re-parsed per encode call.

Declaring tags::

    @dataclass
    class Request:
        host: str = header_field("Host")
        tags: Annotated[list[str], header("X-Tag,omitempty")] = field(default_factory=list)
        base: Annotated[Common, Embedded] = field(default_factory=Common)

Optional annotations (``T | None``) stand in for pointers: ``None`` is a nil
pointer, and ``omitempty`` on an optional field only drops ``None``.
"""

from __future__ import annotations

import builtins
import dataclasses
import functools
import logging
import sys
import types
import typing
from dataclasses import dataclass
from typing import Annotated, Any, Union

from pydantic import BaseModel

from headerlines.domain.errors import InvalidFieldTypeError
from headerlines.domain.marshal import is_marshaler_type
from headerlines.domain.tags import SKIP, TagOptions, resolve_key

logger = logging.getLogger(__name__)

DEFAULT_TAG_KEY = "header"
EMBEDDED_KEY = "headerlines.embedded"
MAX_INDIRECTION = 8


@dataclass(frozen=True, slots=True)
class HeaderTag:
    """Tag marker for ``Annotated`` field declarations."""

    raw: str


class _EmbeddedMarker:
    def __repr__(self) -> str:
        return "Embedded"


Embedded: Any = _EmbeddedMarker()
"""Marker promoting a nested record's fields into the parent."""


def header(raw: str) -> HeaderTag:
    """Build an ``Annotated`` tag marker, e.g. ``Annotated[str, header("Z")]``."""
    return HeaderTag(raw)


def header_field(raw: str, *, tag_key: str = DEFAULT_TAG_KEY, **kwargs: Any) -> Any:
    """``dataclasses.field`` carrying a header tag in its metadata.

    The tag is stored under *tag_key*, so it is only seen by encoders whose
    ``EncoderConfig.tag_key`` matches. ``header()`` markers in ``Annotated``
    apply under every tag key.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag_key] = raw
    return dataclasses.field(metadata=metadata, **kwargs)


def embedded_field(**kwargs: Any) -> Any:
    """``dataclasses.field`` marking a nested record as embedded."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[EMBEDDED_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True, slots=True)
class FieldPlan:
    """Everything the encoder needs to know about one declared field.

    Attributes:
        name: Attribute name on the record.
        key: Effective header key (``"-"`` when skipped by tag).
        options: Parsed tag options.
        skip: Never encode this field (private name or ``"-"`` tag).
        optional: Annotation admits ``None`` (pointer semantics).
        embedded: Untagged embedded record; its fields are spliced in place.
        marshaler: Annotation names a type implementing ``encode_header``.
    """

    name: str
    key: str
    options: TagOptions = TagOptions()
    skip: bool = False
    optional: bool = False
    embedded: bool = False
    marshaler: bool = False


def is_record_type(tp: Any) -> bool:
    return isinstance(tp, type) and (dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel))


def is_record(value: Any) -> bool:
    """True for dataclass and pydantic model instances (not classes)."""
    return not isinstance(value, type) and is_record_type(type(value))


def unwrap_annotation(
    annotation: Any, owner: type, field_name: str
) -> tuple[Any, bool, list[Any]]:
    """Peel ``Annotated``, ``Optional`` and ``NewType`` layers.

    Returns ``(base_type, optional, markers)``. Unions of several non-None
    members are left as the base type.
    """
    optional = False
    markers: list[Any] = []
    for _ in range(MAX_INDIRECTION):
        origin = typing.get_origin(annotation)
        if origin is Annotated:
            markers.extend(annotation.__metadata__)
            annotation = annotation.__origin__
            continue
        if origin is Union or origin is types.UnionType:
            members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
            if len(members) == len(typing.get_args(annotation)):
                return annotation, optional, markers
            optional = True
            if len(members) != 1:
                return Union[tuple(members)], optional, markers  # noqa: UP007
            annotation = members[0]
            continue
        supertype = getattr(annotation, "__supertype__", None)
        if supertype is not None:
            annotation = supertype
            continue
        return annotation, optional, markers
    raise InvalidFieldTypeError(
        owner, field_name, f"annotation indirection exceeds {MAX_INDIRECTION} levels"
    )


def _tag_from_markers(markers: list[Any]) -> str | None:
    for marker in markers:
        if isinstance(marker, HeaderTag):
            return marker.raw
    return None


class UnresolvedName:
    """Stand-in for a name an annotation uses but its module cannot see.

    Typical source: ``from __future__ import annotations`` with a record class
    defined inside a function. Only the field naming it loses type detail.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"UnresolvedName({self.name!r})"

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        raise TypeError(f"{self.name} could not be resolved")

    def __getattr__(self, attr: str) -> UnresolvedName:
        if attr.startswith("_"):
            raise AttributeError(attr)
        return UnresolvedName(f"{self.name}.{attr}")

    def __getitem__(self, item: Any) -> UnresolvedName:
        return self

    def __or__(self, other: Any) -> Any:
        return Union[self, other]  # noqa: UP007

    def __ror__(self, other: Any) -> Any:
        return Union[other, self]  # noqa: UP007


class _LenientNamespace(dict[str, Any]):
    """Module globals, then the class body, then builtins, then a stand-in."""

    def __init__(self, global_vars: dict[str, Any], class_vars: dict[str, Any]) -> None:
        super().__init__()
        self._globals = global_vars
        self._class_vars = class_vars

    def __missing__(self, key: str) -> Any:
        if key in self._globals:
            return self._globals[key]
        if key in self._class_vars:
            return self._class_vars[key]
        if hasattr(builtins, key):
            return getattr(builtins, key)
        return UnresolvedName(key)


def _declaring_class(cls: type, name: str) -> type:
    for klass in cls.__mro__:
        if name in klass.__dict__.get("__annotations__", {}):
            return klass
    return cls


def _resolve_field_annotation(cls: type, f: dataclasses.Field[Any]) -> Any:
    if not isinstance(f.type, str):
        return f.type
    owner = _declaring_class(cls, f.name)
    module = sys.modules.get(owner.__module__)
    namespace = _LenientNamespace(vars(module) if module else {}, dict(vars(owner)))
    try:
        annotation = eval(f.type, {}, namespace)  # noqa: S307
    except Exception as exc:
        raise InvalidFieldTypeError(
            cls, f.name, f"annotation {f.type!r} cannot be evaluated: {exc}"
        ) from exc
    logger.debug(
        "Resolved %s.%s field by field", cls.__qualname__, f.name, extra={"annotation": f.type}
    )
    return annotation


def _dataclass_fields(cls: type, tag_key: str) -> list[tuple[str, Any, str | None, bool]]:
    try:
        hints: dict[str, Any] | None = typing.get_type_hints(cls, include_extras=True)
    except Exception as exc:
        logger.debug("Type hints of %s need per-field resolution: %s", cls.__qualname__, exc)
        hints = None
    result = []
    for f in dataclasses.fields(cls):
        if hints is not None and f.name in hints:
            annotation = hints[f.name]
        else:
            annotation = _resolve_field_annotation(cls, f)
        raw = f.metadata.get(tag_key)
        tag = raw.raw if isinstance(raw, HeaderTag) else raw
        result.append((f.name, annotation, tag, bool(f.metadata.get(EMBEDDED_KEY))))
    return result


def _model_fields(cls: type[BaseModel], tag_key: str) -> list[tuple[str, Any, str | None, bool]]:
    result = []
    for name, info in cls.model_fields.items():
        annotation = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        extra = info.json_schema_extra
        tag = extra.get(tag_key) if isinstance(extra, dict) else None
        result.append((name, annotation, tag, False))
    return result


@functools.lru_cache(maxsize=256)
def field_plans(cls: type, tag_key: str = DEFAULT_TAG_KEY) -> tuple[FieldPlan, ...]:
    """Build (and memoize) the field plans of a record class, in declared order."""
    if dataclasses.is_dataclass(cls):
        declared = _dataclass_fields(cls, tag_key)
    else:
        declared = _model_fields(cls, tag_key)

    plans = []
    for name, annotation, tag, embedded_flag in declared:
        base, optional, markers = unwrap_annotation(annotation, cls, name)
        if tag is None:
            tag = _tag_from_markers(markers)
        embedded = (
            (embedded_flag or any(m is Embedded for m in markers))
            and not tag
            and (is_record_type(base) or isinstance(base, UnresolvedName))
        )
        key, options = resolve_key(name, tag)
        skip = not embedded and (name.startswith("_") or key == SKIP)
        if skip:
            logger.debug("Field %s.%s is never encoded", cls.__qualname__, name)
        plans.append(
            FieldPlan(
                name=name,
                key=key,
                options=options,
                skip=skip,
                optional=optional,
                embedded=embedded,
                marshaler=is_marshaler_type(base),
            )
        )
    logger.debug("Built %d field plans for %s", len(plans), cls.__qualname__)
    return tuple(plans)
