import pytest
from radvd_dispatch.config import Config


TEMPLATE = '''interface lan1 {
    AdvSendAdvert on;
    @PREFIX@
    prefix fd00:1::/64 {
        AdvValidLifetime infinity;
        AdvPreferredLifetime infinity;
    };
};
'''

GENERATED = '''interface lan1 {
    AdvSendAdvert on;
    prefix fd00:2::/64 {
        DecrementLifetimes on;
        AdvValidLifetime 1800;
        AdvPreferredLifetime 900;
    };
    prefix fd00:1::/64 {
        AdvValidLifetime infinity;
        AdvPreferredLifetime infinity;
    };
};
'''


class FakeProbe(object):
    def __init__(self, addresses=None):
        self.addresses = addresses or dict()
        self.calls = list()

    def probe(self, iface):
        self.calls.append(iface)
        return list(self.addresses.get(iface, ()))


class RecordingNotifier(object):
    def __init__(self):
        self.calls = list()

    def reload(self):
        self.calls.append('reload')
        return True

    def reset(self):
        self.calls.append('reset')
        return True


@pytest.fixture
def probe():
    return FakeProbe({'lan1': [('fd00:2::/64', '1800', '900')]})


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def cfg(tmp_path):
    return Config(
        template=str(tmp_path / 'radvd.conf.tmpl'),
        output=str(tmp_path / 'radvd.conf'),
        pid_file=str(tmp_path / 'radvd.pid'),
    )
