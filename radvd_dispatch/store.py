import typing


Path = typing.Tuple[str, ...]


class Store(object):
    """Ordered hierarchical key-value container.

    A key is a tuple of string components, e.g.
    ('IFACES', 'lan1', 'prefix', 'fd00::/64', 'src_valid').
    Every node remembers the order in which its children were first inserted,
    so interfaces and prefixes are always enumerated in discovery order.
    """

    def __init__(self):
        self.values = dict()  # type: typing.Dict[Path, typing.Any]
        self.children = dict()  # type: typing.Dict[Path, typing.List[str]]

    def set(self, path: typing.Sequence[str], value) -> None:
        if value is None or value == '':
            return
        path = tuple(path)
        if path not in self.values:
            self._link(path)
        self.values[path] = value

    def _link(self, path: Path) -> None:
        # register every missing ancestor too, so intermediate nodes are enumerable
        for depth in range(len(path), 0, -1):
            parent, component = path[:depth - 1], path[depth - 1]
            siblings = self.children.setdefault(parent, list())
            if component in siblings:
                break
            siblings.append(component)

    def get(self, path: typing.Sequence[str], default=None):
        return self.values.get(tuple(path), default)

    def nth_child(self, parent: typing.Sequence[str], index: int) -> typing.Optional[str]:
        siblings = self.children.get(tuple(parent), ())
        if 0 <= index < len(siblings):
            return siblings[index]
        return None

    def iter_children(self, parent: typing.Sequence[str]) -> typing.Iterator[str]:
        index = 0
        while True:
            child = self.nth_child(parent, index)
            if child is None:
                return
            yield child
            index += 1

    def __contains__(self, path) -> bool:
        return tuple(path) in self.values
