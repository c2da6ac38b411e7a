# necs

A small node store for games. You declare node classes and spawn them into
a `World`. You then read them back by id, either as their concrete type or
as any trait registered for them.

## Declaring nodes

Decorate a class with `necs.node.node`. Its annotated fields become the
node's data. `ClassVar` annotations are skipped.

A field given `ext(default)` as its value is external. It is kept in the
world's component storage, next to other values of the same type, rather
than with the rest of the node. Use `ext()` for an external field with no
default. An external field needs a real type annotation, not a string.

```python
from necs.node import node, ext

@node
class Foo:
    x: int
    y: int
    z: int
    bar: int = ext(0)
```

The decorator attaches a `Foo.Builder` dataclass with the same fields. It
takes keyword arguments only. Node classes cannot be instantiated directly.
Calling `Foo(...)` raises `TypeError`, because nodes are built by a world.

## Using a world

```python
from necs.world import World
from necs.node import Node

world = World()
world.register_node(Foo)

node_id = world.spawn_node(Foo.Builder(x=8, y=3, z=2, bar=2))

foo = world.get_node(Foo, node_id)
print(foo.x, foo.bar)

# Every registered node can also be read as a generic Node,
# with fields looked up by name.
generic = world.get_node_resilient(Node, node_id)
print(generic.get("bar").to(int))   # TypeError if the value is not an int
generic.get("bar").set(5)           # writes back into the world

for each in world.get_nodes(Foo):
    print("found a Foo", each.x)

print(world.get_node_ids(Foo))      # list of NodeId
```

A node you get back is a view onto the stored data. Assigning to one of its
fields, or calling `Field.set`, updates the world. `get` with an unknown
field name raises `KeyError`. `get_node` raises `TypeError` when the id
belongs to a different node type.

## Traits

To read a node through one of your own interfaces, register it with the
world's `node_map` (a `necs.node_map.TypeMap`). Then ask for it with
`get_node_resilient`. The object handed out must be an instance of the trait,
otherwise `TypeError` is raised. The simplest way is to let the node class
inherit from the trait:

```python
class Process:
    def process(self):
        print(self.y)

@node
class Worker(Process):
    y: int

world.register_node(Worker)
world.node_map.register(Worker, Process)   # hands out the node itself
worker_id = world.spawn_node(Worker.Builder(y=3))
world.get_node_resilient(Process, worker_id).process()
```

`TypeMap.register` also takes an optional third argument. It is a function
that turns the built node into the object to hand out, for example an
adapter. Asking for a trait that was never registered raises `KeyError`.
So does asking for a node type that was not registered for that trait.

## Storage

`necs.storage` holds the building blocks a world uses. `SlotMap` is a
container with stable, versioned `SlotKey`s that go stale once their value
is removed. `NodeStorage` and `ComponentStorage` keep one `SlotMap` per node
type or component type. `Storage` bundles the two. External fields are
reached through a `necs.component.ComponentId`.

## What it does not do

A `World` can register, spawn and read nodes, but it cannot remove them.
There is no despawn. There is also no tracking of which nodes or components
are in use, and no persistence: everything lives in memory.

## Tests

```
pip install -e .[test]
pytest
```