import pytest
from radvd_dispatch import run
from conftest import TEMPLATE, GENERATED, FakeProbe, RecordingNotifier


@pytest.fixture
def service(tmp_path, monkeypatch):
    template = tmp_path / 'radvd.conf.tmpl'
    template.write_text(TEMPLATE)
    config = tmp_path / 'radvd_dispatch.conf'
    config.write_text('[general]\ntemplate = %s\noutput = %s\npid_file = %s\n' % (
        template, tmp_path / 'radvd.conf', tmp_path / 'radvd.pid'
    ))

    notifier = RecordingNotifier()
    monkeypatch.setattr(run, 'AddressProbe', lambda: FakeProbe({'lan1': [('fd00:2::/64', '1800', '900')]}))
    monkeypatch.setattr(run, 'RadvdNotifier', lambda pid_file: notifier)
    return tmp_path, str(config), notifier


def test_dispatch(service):
    tmp_path, config, notifier = service
    assert run.dispatch(['-v', '-c', config, 'lan1', 'up']) == 0
    assert (tmp_path / 'radvd.conf').read_text() == GENERATED
    assert notifier.calls == ['reload', 'reset']


def test_dispatch_unknown_event(service):
    tmp_path, config, notifier = service
    assert run.dispatch(['-c', config, 'lan1', 'connectivity-change']) == 0
    assert not (tmp_path / 'radvd.conf').exists()
    assert notifier.calls == []


def test_dispatch_fatal(service):
    tmp_path, config, notifier = service
    (tmp_path / 'radvd.conf.tmpl').write_text('interface {\n};\n')
    (tmp_path / 'radvd.conf').write_text('previous\n')

    assert run.dispatch(['-d', '-c', config, 'lan1', 'up']) == 1
    assert (tmp_path / 'radvd.conf').read_text() == 'previous\n'
    assert notifier.calls == []


def test_dispatch_missing_config(tmp_path):
    assert run.dispatch(['-c', str(tmp_path / 'missing.conf'), 'lan1', 'up']) == 1
