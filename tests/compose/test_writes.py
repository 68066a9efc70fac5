"""Tests for writes, deletes, write policies and enumeration."""

from dataclasses import dataclass

import pytest

from conjugate import C, UnknownAttributeError, WritePolicy, components, configure, own_keys
from conjugate.compose import resolve_get, resolve_set
from conjugate.core.errors import MalformedKeyError


class C1:
    def __init__(self):
        self.a = "a1"
        self.b = "b1"


class C2:
    def __init__(self):
        self.b = "b2"
        self.c = "c2"


def test_write_goes_to_owning_component():
    """CRITICAL: Whoever owns a field keeps owning it."""
    instance = C(C1, C2)((), ())
    c1, c2 = components(instance)

    instance.a = "new-a"
    instance.c = "new-c"

    assert c1.a == "new-a"
    assert c2.c == "new-c"
    assert "a" not in vars(c2)
    assert "c" not in vars(c1)
    assert vars(instance) == {}


def test_shared_name_writes_to_highest_precedence_owner():
    instance = C(C1, C2)((), ())
    c1, c2 = components(instance)

    instance.b = "new-b"

    assert c2.b == "new-b"
    assert c1.b == "b1"


def test_component_state_matches_independent_construction():
    instance = C(C1, C2)((), ())
    _, c2 = components(instance)
    independent = C2()

    assert vars(c2) == vars(independent)
    instance.c = "changed"
    independent.c = "changed"
    assert vars(c2) == vars(independent)


def test_write_then_read_preserves_identity():
    instance = C(C1, C2)((), ())
    payload = {"nested": [1, 2]}

    instance.a = payload

    assert instance.a is payload
    assert components(instance)[0].a is payload


def test_unowned_write_falls_back_to_primary():
    instance = C(C1, C2)((), ())
    c1, c2 = components(instance)

    instance.extra = 1

    assert c1.extra == 1
    assert not hasattr(c2, "extra")
    assert instance.extra == 1


def test_own_policy_stores_on_composite():
    instance = C(C1, C2, write_policy=WritePolicy.OWN)((), ())
    c1, _ = components(instance)

    instance.extra = 1

    assert vars(instance) == {"extra": 1}
    assert not hasattr(c1, "extra")
    assert instance.extra == 1


def test_reject_policy_raises_for_unknown_fields():
    instance = C(C1, C2, write_policy="reject")((), ())

    instance.a = "allowed"
    with pytest.raises(UnknownAttributeError, match="has no attribute 'extra'"):
        instance.extra = 1
    with pytest.raises(AttributeError):
        instance.extra = 1

    assert instance.a == "allowed"


def test_configured_policy_applies_to_new_composites():
    configure(write_policy="own")

    instance = C(C1, C2)((), ())
    instance.extra = 1

    assert vars(instance) == {"extra": 1}


def test_subclass_annotated_field_is_stored_on_composite():
    class Sub(C(C1, C2)):
        label: str

        def __init__(self):
            super().__init__((), ())
            self.label = "sub"

    instance = Sub()
    c1, c2 = components(instance)

    assert vars(instance) == {"label": "sub"}
    assert not hasattr(c1, "label")
    assert instance.label == "sub"


def test_subclass_class_attribute_write_stays_on_composite():
    class Sub(C(C1, C2)):
        b = "sub"

    instance = Sub((), ())
    instance.b = "written"

    assert instance.b == "written"
    assert vars(instance) == {"b": "written"}
    assert Sub.b == "sub"
    assert components(instance)[1].b == "b2"


def test_property_setter_runs_with_composite_as_self():
    class Temperature:
        def __init__(self):
            self.celsius = 0.0

    class Fahrenheit:
        @property
        def fahrenheit(self):
            return self.celsius * 9 / 5 + 32

        @fahrenheit.setter
        def fahrenheit(self, value):
            self.celsius = (value - 32) * 5 / 9

    instance = C(Temperature, Fahrenheit)((), ())
    instance.fahrenheit = 212

    assert components(instance)[0].celsius == 100
    assert instance.fahrenheit == 212


def test_read_only_property_rejects_writes():
    class Base:
        @property
        def fixed(self):
            return 1

    with pytest.raises(AttributeError):
        C(Base)(()).fixed = 2


def test_slots_dataclass_components():
    @dataclass(slots=True)
    class Position:
        x: float
        y: float

    @dataclass(slots=True)
    class Velocity:
        dx: float
        dy: float

    instance = C(Position, Velocity)((0.0, 1.0), (2.0, 3.0))
    position, velocity = components(instance)

    instance.x = instance.x + instance.dx

    assert position.x == 2.0
    assert own_keys(instance) == ["dx", "dy", "x", "y"]


def test_frozen_component_write_error_surfaces():
    @dataclass(frozen=True)
    class Frozen:
        value: int

    class Mixin:
        pass

    instance = C(Frozen, Mixin)((1,), ())

    with pytest.raises(AttributeError):
        instance.value = 2
    assert instance.value == 1


def test_delete_removes_from_owner():
    instance = C(C1, C2)((), ())
    c1, c2 = components(instance)

    del instance.b
    assert "b" not in vars(c2)
    assert instance.b == "b1"

    del instance.b
    assert "b" not in vars(c1)
    assert not hasattr(instance, "b")


def test_delete_refuses_class_members():
    class Base:
        def who(self):
            return "Base"

    instance = C(Base)(())

    with pytest.raises(AttributeError, match="cannot delete class member 'who'"):
        del instance.who
    assert instance.who() == "Base"


def test_delete_missing_attribute():
    with pytest.raises(AttributeError, match="has no attribute 'ghost'"):
        del C(C1)(()).ghost


def test_enumeration_deduplicates_keys():
    """Enumeration: own storage, mixins (last first), primary last, no duplicates."""
    instance = C(C1, C2)((), ())

    keys = own_keys(instance)

    assert sorted(keys) == ["a", "b", "c"]
    assert keys == ["b", "c", "a"]


def test_enumeration_excludes_class_members_and_includes_own_storage():
    class Base:
        def method(self):
            pass

    instance = C(Base, C1, write_policy="own")((), ())
    instance.own = True

    assert own_keys(instance) == ["own", "a", "b"]


def test_malformed_keys_rejected_before_resolution():
    instance = C(C1)(())

    with pytest.raises(MalformedKeyError):
        resolve_get(instance, 1)  # type: ignore[arg-type]
    with pytest.raises(MalformedKeyError):
        resolve_set(instance, None, 1, WritePolicy.PRIMARY)  # type: ignore[arg-type]
