from keylight.core import ALL, Selection, by_ordinal
from keylight.models import DeviceRegistry

REGISTRY = DeviceRegistry(lights={"desk": "10.0.0.2", "shelf": "10.0.0.3"})


def test_all_resolves_every_address_in_order():
    """Test All resolves every address in order."""
    assert Selection().resolve_addresses(REGISTRY) == ["10.0.0.2", "10.0.0.3"]


def test_ordinal_resolves_single_address():
    """Test an ordinal resolves its single address."""
    selection = Selection(by_ordinal(2))
    assert selection.resolve_addresses(REGISTRY) == ["10.0.0.3"]
    assert selection.selected_name(REGISTRY) == "shelf"
    assert selection.is_targeted(2)
    assert not selection.is_targeted(1)


def test_missing_ordinal_resolves_nothing():
    """Test an ordinal past the end resolves nothing."""
    smaller = DeviceRegistry(lights={"desk": "10.0.0.2"})
    assert Selection(by_ordinal(2)).resolve_addresses(smaller) == []


def test_select_ignores_unknown_ordinal():
    """Test selecting a missing ordinal keeps the previous mode."""
    selection = Selection(by_ordinal(1))
    assert not selection.select(by_ordinal(3), REGISTRY)
    assert selection.mode == by_ordinal(1)

    assert selection.select(ALL, REGISTRY)
    assert selection.mode.is_all
