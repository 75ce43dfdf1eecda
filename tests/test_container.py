import pytest

from pathbind import Container, NotRegisteredError, Value


def test_create_unregistered_name_raises():
    c = Container()
    with pytest.raises(NotRegisteredError):
        c.create("Unknown")


def test_not_registered_is_a_key_error():
    c = Container()
    with pytest.raises(KeyError):
        c.create("Unknown")


def test_create_registered_class_returns_instance():
    c = Container()

    class A: ...

    c.register("A", A)
    assert isinstance(c.create("A"), A)


def test_create_calls_constructor_once_per_create():
    c = Container()
    calls = []

    class A:
        def __init__(self):
            calls.append(self)

    c.register("A", A)
    c.create("A")
    c.create("A")
    assert len(calls) == 2


def test_set_value_is_returned_verbatim():
    c = Container()
    value = {"answer": 42}

    c.set("k", value)
    assert c.create("k") is value


def test_set_value_does_not_call_or_configure_callable_values():
    c = Container()

    def never_called(*args):
        raise AssertionError("value bindings must not be invoked")

    c.set("fn", never_called)
    assert c.create("fn") is never_called


def test_set_replaces_constructor_registration():
    c = Container()

    class A: ...

    c.register("A", A)
    c.set("A", 5)
    assert c.create("A") == 5


def test_is_registered_uses_exact_key():
    c = Container()

    class Foo: ...

    c.register("Service->Foo", Foo)
    assert c.is_registered("Service->Foo")
    assert not c.is_registered("Foo")


def test_every_create_builds_a_fresh_graph():
    c = Container()

    class Repo: ...

    class Service:
        def __init__(self, repo):
            self.repo = repo

    c.register("Repo", Repo)
    c.register("Service", Service, ["Repo"])

    s1 = c.create("Service")
    s2 = c.create("Service")
    assert s1 is not s2
    assert s1.repo is not s2.repo


def test_independent_roots_share_no_instances():
    c = Container()

    class Dep: ...

    class One:
        def __init__(self, dep):
            self.dep = dep

    class Two:
        def __init__(self, dep):
            self.dep = dep

    c.register("Dep", Dep)
    c.register("One", One, ["Dep"])
    c.register("Two", Two, ["Dep"])

    assert c.create("One").dep is not c.create("Two").dep


def test_create_recursively_builds_constructor_dependencies():
    c = Container()

    class DB: ...

    class Repo:
        def __init__(self, db):
            self.db = db

    class Service:
        def __init__(self, repo, name):
            self.repo = repo
            self.name = name

    c.register("DB", DB)
    c.register("Repo", Repo, ["DB"])
    c.register("Service", Service, ["Repo", Value("svc")])

    svc = c.create("Service")
    assert isinstance(svc.repo, Repo)
    assert isinstance(svc.repo.db, DB)
    assert svc.name == "svc"


def test_create_with_callback_invokes_it_with_container_and_path():
    c = Container()
    seen = []

    def callback(container, path):
        seen.append((container, path))
        return "made"

    assert c.create(callback, ["Root"]) == "made"
    assert seen == [(c, ("Root",))]


def test_constructor_argument_callback_receives_path_and_index():
    c = Container()
    seen = []

    class A:
        def __init__(self, first, second):
            self.first = first
            self.second = second

    def provide(container, path, index):
        seen.append((container, path, index))
        return index * 10

    c.register("A", A, [provide, provide])
    a = c.create("A")

    assert (a.first, a.second) == (0, 10)
    assert seen == [(c, ("A",), 0), (c, ("A",), 1)]


def test_factory_return_value_is_the_instance():
    c = Container()
    made = object()

    c.register("thing", factory=lambda: made)
    assert c.create("thing") is made


def test_factory_receives_resolved_arguments():
    c = Container()

    def make_pair(left, right):
        return (left, right)

    c.set("left", 1)
    c.register("pair", factory=make_pair, config=["left", Value(2)])
    assert c.create("pair") == (1, 2)


def test_class_returning_other_object_from_new_supersedes_instance():
    c = Container()
    replacement = {"replaced": True}

    class Odd:
        def __new__(cls):
            return replacement

    c.register("Odd", Odd)
    assert c.create("Odd") is replacement


def test_factory_instance_receives_property_injection():
    c = Container()

    class Plain: ...

    c.set("name", "configured")
    c.register("plain", factory=Plain, config={"config": ["name"]})
    assert c.create("plain").name == "configured"


def test_register_rejects_non_class_constructor():
    c = Container()
    with pytest.raises(TypeError):
        c.register("fn", lambda: None)


def test_register_requires_exactly_one_of_constructor_or_factory():
    c = Container()

    class A: ...

    with pytest.raises(ValueError, match="not both"):
        c.register("A", A, factory=A)
    with pytest.raises(ValueError, match="must be provided"):
        c.register("A")


def test_custom_separator_is_used_for_lookup_and_messages():
    c = Container(separator=":")

    class Foo: ...

    class SpecialFoo(Foo): ...

    class Service:
        def __init__(self, foo):
            self.foo = foo

    c.register("Foo", Foo)
    c.register("Service:Foo", SpecialFoo)
    c.register("Service", Service, ["Foo"])

    assert type(c.create("Service").foo) is SpecialFoo

    with pytest.raises(NotRegisteredError) as ctx:
        c.create("Missing", ["Service"])
    assert "Service:Missing" in str(ctx.value)


def test_empty_separator_raises():
    with pytest.raises(ValueError):
        Container(separator="")


def test_factory_returning_none_raises():
    c = Container()

    def make_nothing():
        return None

    c.register("nothing", factory=make_nothing)
    with pytest.raises(TypeError, match="make_nothing returned None"):
        c.create("nothing")


def test_class_constructor_is_not_checked_for_none():
    c = Container()

    class Weird:
        def __new__(cls):
            return None

    c.register("Weird", Weird)
    assert c.create("Weird") is None
