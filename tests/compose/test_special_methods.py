"""Tests for forwarding of protocol special methods."""

import logging

import pytest

from conjugate import C, component, configure


class Meta:
    def __init__(self):
        self.title = "bag"


class Bag:
    def __init__(self):
        self.items = [1, 2, 3]

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def __contains__(self, item):
        return item in self.items


class Resource:
    def __init__(self):
        self.opened = False

    def __enter__(self):
        self.opened = True
        return self

    def __exit__(self, *exc_info):
        self.opened = False
        return False


class Scaler:
    def __init__(self, factor: int = 2):
        self.factor = factor

    def __call__(self, value):
        return value * self.factor


def test_container_protocol_is_forwarded():
    instance = C(Meta, Bag)((), ())

    assert len(instance) == 3
    assert list(instance) == [1, 2, 3]
    assert instance[0] == 1
    assert 2 in instance
    assert 9 not in instance


def test_context_manager_protocol_runs_on_composite():
    instance = C(Meta, Resource)((), ())

    with instance as entered:
        assert entered is instance
        assert instance.opened is True
    assert instance.opened is False


def test_call_is_forwarded():
    instance = C(Meta, Scaler)((), (3,))

    assert instance(2) == 6


def test_only_provided_special_methods_are_installed():
    Composite = C(Meta, Scaler)

    assert "__call__" in Composite.__dict__
    assert "__len__" not in Composite.__dict__
    with pytest.raises(TypeError):
        len(Composite((), ()))


def test_removed_special_method_raises_and_warns(caplog):
    class Sized:
        def __len__(self):
            return 1

    instance = C(Meta, Sized)((), ())
    assert len(instance) == 1

    del Sized.__len__

    with caplog.at_level(logging.WARNING, logger="conjugate.compose.conjugate"):
        with pytest.raises(TypeError, match="does not support __len__"):
            len(instance)
    assert "no component provides __len__" in caplog.text


def test_forwarding_can_be_disabled():
    configure(forward_special_methods=False)

    instance = C(Meta, Bag)((), ())

    assert "__len__" not in type(instance).__dict__
    with pytest.raises(TypeError):
        len(instance)
    assert instance.__len__() == 3


def test_forwarded_override_using_super():
    class UpperKeys(dict):
        def __setitem__(self, key, value):
            super().__setitem__(key.upper(), value)

    instance = C(UpperKeys, Meta)((), ())
    instance["a"] = 1

    assert component(instance, UpperKeys) == {"A": 1}
    assert instance["A"] == 1
    assert "A" in instance
