from event_estimator.engine.models import Selections


def test_addons_deduplicated_in_order():
    selections = Selections.from_payload({'addons': ['b', 'a', 'b', 'c', 'a']})
    assert selections.addons == ('b', 'a', 'c')


def test_non_string_addon_ids_dropped():
    selections = Selections.from_payload({'addons': ['a', 3, None, {'id': 'x'}, 'b']})
    assert selections.addons == ('a', 'b')


def test_addons_not_a_list():
    assert Selections.from_payload({'addons': 'addon_av'}).addons == ()


def test_scalars_become_strings():
    selections = Selections.from_payload({'days': 30, 'ratio': 1.5, 'whole': 7.0, 'flag': True})
    assert selections.options == {'days': '30', 'ratio': '1.5', 'whole': '7', 'flag': 'true'}


def test_unusable_values_count_as_unset():
    selections = Selections.from_payload({'a': '', 'b': None, 'c': ['x'], 'd': {'k': 'v'}, 'e': 'ok'})
    assert selections.options == {'e': 'ok'}
    assert selections.get('a') is None
    assert selections.get('c') is None


def test_none_payload():
    assert Selections.from_payload(None) == Selections()


def test_to_dict_round_trips():
    payload = {'addons': ['addon_av'], 'seating_type': 'open'}
    assert Selections.from_payload(payload).to_dict() == payload
