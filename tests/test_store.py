from radvd_dispatch.store import Store


def test_children_keep_insertion_order():
    store = Store()
    store.set(('IFACES', 'a'), 1)
    store.set(('IFACES', 'b'), 2)
    store.set(('IFACES', 'c'), 3)
    store.set(('IFACES', 'a'), 4)

    assert store.nth_child(('IFACES',), 2) == 'c'
    assert store.nth_child(('IFACES',), 0) == 'a'
    assert store.nth_child(('IFACES',), 1) == 'b'
    assert list(store.iter_children(('IFACES',))) == ['a', 'b', 'c']


def test_set_overwrites():
    store = Store()
    store.set(['x', 'y'], 'first')
    store.set(['x', 'y'], 'second')
    assert store.get(['x', 'y']) == 'second'
    assert list(store.iter_children(['x'])) == ['y']


def test_empty_value_is_not_inserted():
    store = Store()
    store.set(('x', 'y'), None)
    store.set(('x', 'z'), '')
    assert ('x', 'y') not in store
    assert store.nth_child(('x',), 0) is None
    assert store.nth_child((), 0) is None


def test_false_and_zero_are_values():
    store = Store()
    store.set(('flag',), False)
    store.set(('count',), 0)
    assert store.get(('flag',)) is False
    assert store.get(('count',)) == 0


def test_absent_lookups():
    store = Store()
    store.set(('x', 'y'), 1)
    assert store.get(('x', 'nope')) is None
    assert store.get(('nope',), 'default') == 'default'
    assert store.nth_child(('x',), 1) is None
    assert store.nth_child(('x',), -1) is None
    assert store.nth_child(('unknown',), 0) is None


def test_intermediate_nodes_are_enumerable():
    store = Store()
    store.set(('IFACES', 'lan1', 'prefix', 'fd00::/64', 'src_valid'), '600')
    store.set(('IFACES', 'lan2', 'prefix', 'fd01::/64', 'src'), True)
    assert list(store.iter_children(('IFACES',))) == ['lan1', 'lan2']
    assert list(store.iter_children(('IFACES', 'lan1', 'prefix'))) == ['fd00::/64']
    assert ('IFACES', 'lan1') not in store
