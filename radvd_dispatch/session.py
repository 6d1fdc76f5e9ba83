import typing
from .store import Store


MODE_SOURCE = 'src'
MODE_CURRENT = 'cur'
MODE_WIRED = 'wired'

# prefix key holding the facts of the placeholder itself
DYNAMIC = 'dynamic'
INFINITY = 'infinity'

IFACES = 'IFACES'


class Session(object):
    """Facts gathered during one run.

    Layout inside the store:
        IFACES/<iface>/{in_src,in_cur,dynamic,decrementing}
        IFACES/<iface>/prefix/<prefix>/<mode>[_valid|_pref|_decr|_has_decr]
        IFACES/<iface>/prefix/dynamic/saved/<n>
        IFACES/<iface>/wired/<prefix>            (probe order)
    """

    def __init__(self):
        self.store = Store()

    # interfaces

    def interfaces(self) -> typing.Iterator[str]:
        return self.store.iter_children((IFACES,))

    def iface_get(self, iface: str, attr: str):
        return self.store.get((IFACES, iface, attr))

    def iface_set(self, iface: str, attr: str, value) -> None:
        self.store.set((IFACES, iface, attr), value)

    def mark_present(self, iface: str, mode: str) -> None:
        self.iface_set(iface, 'in_%s' % mode, True)

    def is_present(self, iface: str, mode: str) -> bool:
        return bool(self.iface_get(iface, 'in_%s' % mode))

    def is_dynamic(self, iface: str) -> bool:
        return bool(self.iface_get(iface, 'dynamic'))

    def is_decrementing(self, iface: str) -> bool:
        return bool(self.iface_get(iface, 'decrementing'))

    # prefixes

    def prefixes(self, iface: str) -> typing.Iterator[str]:
        for prefix in self.store.iter_children((IFACES, iface, 'prefix')):
            if prefix != DYNAMIC:
                yield prefix

    def prefix_get(self, iface: str, prefix: str, field: str):
        return self.store.get((IFACES, iface, 'prefix', prefix, field))

    def prefix_set(self, iface: str, prefix: str, field: str, value) -> None:
        self.store.set((IFACES, iface, 'prefix', prefix, field), value)

    def add_prefix(
            self, iface: str, prefix: str, mode: str,
            valid: typing.Optional[str] = None, pref: typing.Optional[str] = None,
            decr: bool = False, has_decr: bool = False,
    ) -> None:
        self.prefix_set(iface, prefix, mode, True)
        self.prefix_set(iface, prefix, '%s_valid' % mode, valid)
        self.prefix_set(iface, prefix, '%s_pref' % mode, pref)
        self.prefix_set(iface, prefix, '%s_decr' % mode, bool(decr))
        self.prefix_set(iface, prefix, '%s_has_decr' % mode, bool(has_decr))
        if decr and mode == MODE_SOURCE:
            self.iface_set(iface, 'decrementing', True)

    def add_dynamic(
            self, iface: str,
            valid: typing.Optional[str] = None, pref: typing.Optional[str] = None,
            decr: bool = True, has_decr: bool = False,
    ) -> None:
        self.iface_set(iface, 'dynamic', True)
        self.add_prefix(iface, DYNAMIC, MODE_SOURCE, valid, pref, decr, has_decr)

    def dynamic_decrements(self, iface: str) -> bool:
        return bool(self.prefix_get(iface, DYNAMIC, 'src_decr'))

    def decrements(self, iface: str, prefix: str) -> bool:
        """Whether the regenerated configuration asks radvd to decrement lifetimes of the prefix"""

        if self.prefix_get(iface, prefix, MODE_SOURCE):
            return bool(self.prefix_get(iface, prefix, 'src_decr'))
        return bool(self.prefix_get(iface, prefix, 'wired_decr'))

    # placeholder body

    def add_saved_line(self, iface: str, line: str) -> None:
        parent = (IFACES, iface, 'prefix', DYNAMIC, 'saved')
        count = len(list(self.store.iter_children(parent)))
        self.store.set(parent + (str(count),), line)

    def saved_lines(self, iface: str) -> typing.List[str]:
        parent = (IFACES, iface, 'prefix', DYNAMIC, 'saved')
        return [self.store.get(parent + (index,)) for index in self.store.iter_children(parent)]

    # live addresses

    def add_wired(self, iface: str, prefix: str, valid: str, pref: str) -> None:
        if (IFACES, iface, 'wired', prefix) in self.store:
            # several addresses of the same /64, the first one reported wins
            return
        self.store.set((IFACES, iface, 'wired', prefix), True)
        self.add_prefix(iface, prefix, MODE_WIRED, valid, pref)
        if not self.prefix_get(iface, prefix, MODE_SOURCE) and self.dynamic_decrements(iface):
            self.prefix_set(iface, prefix, 'wired_decr', True)
            self.iface_set(iface, 'decrementing', True)

    def wired_prefixes(self, iface: str) -> typing.Iterator[str]:
        return self.store.iter_children((IFACES, iface, 'wired'))
