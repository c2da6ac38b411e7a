from abc import abstractmethod

import pytest

from necs.node import Field, Node, NodeId, NodeTrait, ext, node
from necs.storage import Storage


class Process(NodeTrait):
    @abstractmethod
    def process(self):
        ...


@node
class Foo(Process):
    x: int
    y: int
    z: int
    bar: int = ext()

    def process(self):
        return self.y


@node
class WithDefaults:
    name: str = "unnamed"
    weight: float = ext(1.5)


@node
class Baz:
    pass


class Unfinished(NodeTrait):
    @abstractmethod
    def missing(self):
        ...


@node
class Incomplete(Unfinished):
    a: int


@pytest.fixture
def storage():
    store = Storage()
    Foo._register_node(store)
    return store


def spawn_foo(storage, x=8, y=3, z=2, bar=2):
    return Foo.Builder(x=x, y=y, z=z, bar=bar)._move_to_storage(storage)


def test_node_id_equality_and_hash():
    store = Storage()
    Foo._register_node(store)
    node_id = spawn_foo(store)
    same = NodeId(node_type=node_id.node_type, instance=node_id.instance)
    assert same == node_id
    assert hash(same) == hash(node_id)
    assert node_id.node_type is Foo


def test_build_reads_fields(storage):
    node_id = spawn_foo(storage, x=8, y=3, z=2, bar=2)
    foo = Foo._build_from_storage(storage, node_id)
    assert (foo.x, foo.y, foo.z, foo.bar) == (8, 3, 2, 2)
    assert foo.process() == 3


def test_ext_field_lives_in_component_storage(storage):
    spawn_foo(storage, x=8, y=3, z=2, bar=2)
    assert list(storage.components.get_all(int)) == [2]


def test_writes_go_through_to_storage(storage):
    node_id = spawn_foo(storage)
    foo = Foo._build_from_storage(storage, node_id)
    foo.x = 10
    foo.bar = 20
    again = Foo._build_from_storage(storage, node_id)
    assert again.x == 10
    assert again.bar == 20
    assert list(storage.components.get_all(int)) == [20]


def test_get_returns_live_field(storage):
    node_id = spawn_foo(storage, bar=2)
    foo = Foo._build_from_storage(storage, node_id)
    field = foo.get("bar")
    assert isinstance(field, Field)
    assert field.name == "bar"
    assert field.to(int) == 2
    field.set(7)
    assert Foo._build_from_storage(storage, node_id).bar == 7


def test_field_invalid_downcast(storage):
    foo = Foo._build_from_storage(storage, spawn_foo(storage))
    with pytest.raises(TypeError, match="invalid downcast to str"):
        foo.get("x").to(str)


def test_get_unknown_field(storage):
    foo = Foo._build_from_storage(storage, spawn_foo(storage))
    with pytest.raises(KeyError, match="does not exist on Foo"):
        foo.get("nope")


def test_every_node_is_a_node_and_its_traits(storage):
    foo = Foo._build_from_storage(storage, spawn_foo(storage, y=3))
    assert isinstance(foo, Node)
    assert isinstance(foo, Process)
    assert issubclass(Baz, Node)
    assert foo.process() == 3
    assert foo.get("y").to(int) == 3


def test_builder_requires_fields_by_keyword():
    store = Storage()
    Foo._register_node(store)
    with pytest.raises(TypeError):
        Foo.Builder(x=1, y=2, z=3)
    with pytest.raises(TypeError):
        Foo.Builder(1, 2, 3, 4)
    node_id = Foo.Builder(x=1, y=2, z=3, bar=4)._move_to_storage(store)
    built = Foo._build_from_storage(store, node_id)
    assert (built.x, built.y, built.z, built.bar) == (1, 2, 3, 4)


def test_builder_uses_declared_defaults():
    store = Storage()
    WithDefaults._register_node(store)
    builder = WithDefaults.Builder()
    assert builder.name == "unnamed"
    assert builder.weight == 1.5
    built = WithDefaults._build_from_storage(store, builder._move_to_storage(store))
    assert built.name == "unnamed"
    assert list(store.components.get_all(float)) == [1.5]


def test_unit_node_round_trip():
    store = Storage()
    Baz._register_node(store)
    node_id = Baz.Builder()._move_to_storage(store)
    baz = Baz._build_from_storage(store, node_id)
    assert repr(baz) == "Baz()"
    assert len(store.nodes[Baz]) == 1


def test_direct_construction_is_refused():
    class Local:
        a: int

    local_node = node(Local)
    assert local_node.Builder(a=1).a == 1
    with pytest.raises(TypeError, match="Local.Builder"):
        local_node(a=1)


def test_spawn_before_register_fails():
    store = Storage()
    with pytest.raises(KeyError):
        spawn_foo(store)


def test_build_with_wrong_node_type(storage):
    Baz._register_node(storage)
    baz_id = Baz.Builder()._move_to_storage(storage)
    with pytest.raises(TypeError):
        Foo._build_from_storage(storage, baz_id)


def test_unimplemented_trait_method_blocks_building():
    store = Storage()
    Incomplete._register_node(store)
    node_id = Incomplete.Builder(a=1)._move_to_storage(store)
    with pytest.raises(TypeError):
        Incomplete._build_from_storage(store, node_id)


def test_unresolvable_ext_type_is_rejected():
    class Broken:
        thing: "UndefinedName" = ext()  # noqa: F821

    with pytest.raises(TypeError, match="thing"):
        node(Broken)


def test_node_rejects_non_class():
    with pytest.raises(TypeError, match="only classes are supported"):
        node(42)