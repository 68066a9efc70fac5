"""Property tests for the resolution order of instance fields."""

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from conjugate import C, components, own_keys

keys = st.sampled_from(["a", "b", "c", "d"])
field_maps = st.dictionaries(keys, st.integers(), max_size=4)
component_fields = st.lists(field_maps, min_size=1, max_size=4)


def make_components(fields):
    """One class per field map; each instance starts with its map's fields."""
    classes = []
    for index, initial in enumerate(fields):

        def __init__(self, _initial=initial):
            for key, value in _initial.items():
                setattr(self, key, value)

        classes.append(type(f"Part{index}", (), {"__init__": __init__}))
    return classes


def owners_in_order(fields):
    """Auxiliary field maps last first, then the primary."""
    return [*reversed(fields[1:]), fields[0]]


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(fields=component_fields, key=keys)
def test_read_returns_highest_precedence_owner(fields, key):
    """PROPERTY: A field resolves to the first owner in instance order."""
    instance = C(*make_components(fields))()

    expected = next((f[key] for f in owners_in_order(fields) if key in f), None)

    assert getattr(instance, key, None) == expected


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(fields=component_fields)
def test_own_keys_are_unique_and_ordered(fields):
    """PROPERTY: Enumeration lists every instance key once, in resolution order."""
    instance = C(*make_components(fields))()

    expected = list(dict.fromkeys(k for f in owners_in_order(fields) for k in f))

    assert own_keys(instance) == expected


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(fields=component_fields, key=keys, value=st.integers())
def test_write_lands_on_exactly_one_component(fields, key, value):
    """PROPERTY: A write updates the first owner, or the primary when none exists."""
    instance = C(*make_components(fields))()
    parts = components(instance)
    ordered = [*reversed(parts[1:]), parts[0]]
    before = [dict(vars(p)) for p in parts]

    setattr(instance, key, value)

    target = next((p for p in ordered if key in vars(p)), parts[0])
    for part, snapshot in zip(parts, before, strict=True):
        if part is target:
            assert vars(part)[key] == value
        else:
            assert vars(part) == snapshot
    assert getattr(instance, key) == value
