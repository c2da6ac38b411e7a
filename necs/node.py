"""Node declaration: the ``node`` decorator, node ids and by-name field access."""

from __future__ import annotations

import abc
import dataclasses
import typing
from dataclasses import dataclass
from typing import Any, Hashable

from .storage import SlotKey, Storage

_MISSING = dataclasses.MISSING

_BUILTIN_TYPES: dict[str, type] = {
    "int": int,
    "float": float,
    "complex": complex,
    "bool": bool,
    "str": str,
    "bytes": bytes,
    "bytearray": bytearray,
    "list": list,
    "dict": dict,
    "tuple": tuple,
    "set": set,
    "frozenset": frozenset,
    "object": object,
}


@dataclass(frozen=True)
class NodeId:
    """Identifies one stored node: its node type and its key in that type's storage."""

    node_type: Hashable
    instance: SlotKey


class Field:
    """A live view of one field of a node, reached by name."""

    __slots__ = ("_node", "_name")

    def __init__(self, node: NodeTrait, name: str) -> None:
        self._node = node
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> Any:
        return getattr(self._node, self._name)

    def to(self, kind: type) -> Any:
        """Return the field's value, checking that it is an instance of ``kind``."""
        value = self.value
        if not isinstance(value, kind):
            raise TypeError(f"invalid downcast to {getattr(kind, '__name__', kind)}")
        return value

    def set(self, value: Any) -> None:
        """Write ``value`` back into the node's storage."""
        setattr(self._node, self._name, value)

    def __repr__(self) -> str:
        return f"Field({self._name}={self.value!r})"


class NodeTrait(abc.ABC):
    """Base for every trait that nodes can be retrieved as."""

    @abc.abstractmethod
    def get(self, field_name: str) -> Field:
        """Return the field called ``field_name``."""


class Node(NodeTrait):
    """Trait that every class decorated with :func:`node` implements.

    Every node type registered with a world can be retrieved as a ``Node``
    and its fields read through :meth:`NodeTrait.get`.
    """


class _Ext:
    __slots__ = ("default",)

    def __init__(self, default: Any) -> None:
        self.default = default

    def __repr__(self) -> str:
        if self.default is _MISSING:
            return "ext()"
        return f"ext({self.default!r})"


def ext(default: Any = _MISSING) -> Any:
    """Mark a node field as external.

    External fields are stored alongside every other component of the same
    type instead of with the rest of the node.
    """
    return _Ext(default)


@dataclass(frozen=True)
class _FieldSpec:
    name: str
    kind: Any
    is_ext: bool
    index: int
    default: Any


class _NodeBuilder:
    """Base of every generated ``Builder`` class."""

    _node_type: type

    def _move_to_storage(self, storage: Storage) -> NodeId:
        node_type = type(self)._node_type
        recipe = []
        for spec in node_type._necs_fields:
            value = getattr(self, spec.name)
            if spec.is_ext:
                value = storage.components.spawn(spec.kind, value)
            recipe.append(value)
        return storage.nodes.spawn(node_type, recipe)


def _is_node_class(obj: Any) -> bool:
    return isinstance(obj, type) and "_necs_fields" in obj.__dict__


def _is_class_var(kind: Any) -> bool:
    if kind is typing.ClassVar or typing.get_origin(kind) is typing.ClassVar:
        return True
    return isinstance(kind, str) and kind.startswith(("ClassVar", "typing.ClassVar"))


def _resolve(annotation: Any) -> Any:
    """Resolve a string annotation naming a builtin type; leave others as they are."""
    if isinstance(annotation, str):
        return _BUILTIN_TYPES.get(annotation.strip(), annotation)
    return annotation


def _annotations(cls: type) -> dict[str, Any]:
    own = cls.__dict__.get("__annotations__", {})
    return {name: _resolve(annotation) for name, annotation in own.items()}


def _field_property(spec: _FieldSpec) -> property:
    index = spec.index
    if spec.is_ext:

        def fget(self: Any) -> Any:
            return self._necs_storage.components[self._necs_recipe[index]]

        def fset(self: Any, value: Any) -> None:
            self._necs_storage.components[self._necs_recipe[index]] = value

    else:

        def fget(self: Any) -> Any:
            return self._necs_recipe[index]

        def fset(self: Any, value: Any) -> None:
            self._necs_recipe[index] = value

    return property(fget, fset, doc=f"The {spec.name!r} field.")


def _get(self: Any, field_name: str) -> Field:
    if field_name not in type(self)._necs_field_names:
        raise KeyError(f"field {field_name} does not exist on {type(self).__name__}")
    return Field(self, field_name)


def _build_from_storage(cls: type, storage: Storage, node_id: NodeId) -> Any:
    if node_id.node_type is not cls:
        raise TypeError(f"{node_id!r} does not refer to a {cls.__name__} node")
    recipe = storage.nodes[cls][node_id.instance]
    instance = object.__new__(cls)
    object.__setattr__(instance, "_necs_storage", storage)
    object.__setattr__(instance, "_necs_recipe", recipe)
    return instance


def _register_node(cls: type, storage: Storage) -> None:
    storage.nodes.register(cls)
    for spec in cls._necs_fields:
        if spec.is_ext:
            storage.components.register(spec.kind)


def _no_init(self: Any, *args: Any, **kwargs: Any) -> None:
    name = type(self).__name__
    raise TypeError(f"{name} nodes are built by a World; create a {name}.Builder instead")


def _repr(self: Any) -> str:
    body = ", ".join(f"{s.name}={getattr(self, s.name)!r}" for s in type(self)._necs_fields)
    return f"{type(self).__name__}({body})"


def _make_builder(cls: type, specs: list[_FieldSpec]) -> type:
    fields: list[Any] = []
    for spec in specs:
        if spec.default is _MISSING:
            fields.append((spec.name, spec.kind))
        else:
            fields.append((spec.name, spec.kind, dataclasses.field(default=spec.default)))
    builder = dataclasses.make_dataclass(
        f"{cls.__name__}Builder",
        fields,
        bases=(_NodeBuilder,),
        namespace={"_node_type": cls},
        kw_only=True,
    )
    builder.__module__ = cls.__module__
    builder.__qualname__ = f"{cls.__qualname__}Builder"
    builder.__doc__ = f"Builds a {cls.__name__} node to hand to World.spawn_node."
    return builder


def node(cls: type) -> type:
    """Turn an annotated class into a node type.

    Each annotated field becomes a view into world storage; fields given
    :func:`ext` as their value are kept in component storage. A ``Builder``
    dataclass with the same fields is attached to the class for spawning.
    """
    if not isinstance(cls, type):
        raise TypeError("only classes are supported")

    specs: list[_FieldSpec] = []
    for name, kind in _annotations(cls).items():
        if _is_class_var(kind):
            continue
        default = cls.__dict__.get(name, _MISSING)
        is_ext = isinstance(default, _Ext)
        if is_ext:
            default = default.default
            if isinstance(kind, str):
                raise TypeError(f"cannot resolve the type of ext field {name!r}")
        specs.append(_FieldSpec(name, kind, is_ext, len(specs), default))

    cls._necs_fields = tuple(specs)
    cls._necs_field_names = frozenset(spec.name for spec in specs)
    for spec in specs:
        setattr(cls, spec.name, _field_property(spec))
    cls.get = _get
    cls._build_from_storage = classmethod(_build_from_storage)
    cls._register_node = classmethod(_register_node)
    cls.__init__ = _no_init
    if "__repr__" not in cls.__dict__:
        cls.__repr__ = _repr
    cls.Builder = _make_builder(cls, specs)
    abc.update_abstractmethods(cls)
    Node.register(cls)
    return cls