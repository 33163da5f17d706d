import logging

from fakes import FakeManagedObject
from srm_cmdlets.utils.unique import moref_of, unique_by_key


def test_first_occurrence_wins_and_order_is_kept():
    a1 = FakeManagedObject('vm-1', 'first')
    b = FakeManagedObject('vm-2')
    a2 = FakeManagedObject('vm-1', 'second')
    c = FakeManagedObject('vm-3')

    result = unique_by_key([a1, b, a2, c])

    assert result == [a1, b, c]
    assert result[0].name == 'first'


def test_keyless_items_are_dropped_with_warning(caplog):
    keyed = FakeManagedObject('vm-1')

    with caplog.at_level(logging.WARNING, logger='srm_cmdlets'):
        result = unique_by_key([keyed, object(), FakeManagedObject('')])

    assert result == [keyed]
    assert caplog.text.count("without a reference key") == 2


def test_custom_key():
    rows = [{'id': 'a'}, {'id': 'b'}, {'id': 'a'}]
    assert unique_by_key(rows, key=lambda r: r['id']) == [{'id': 'a'}, {'id': 'b'}]


def test_empty_input():
    assert unique_by_key([]) == []


def test_moref_of_stringifies_keys():
    assert moref_of(FakeManagedObject(42)) == '42'
    assert moref_of(None) is None
    assert moref_of(object()) is None
