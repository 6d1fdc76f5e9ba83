import io
import pytest
from radvd_dispatch.config import Config, ConfigException


def test_defaults():
    cfg = Config.from_file(io.StringIO(''))
    assert cfg.template == Config.DEFAULT_TEMPLATE
    assert cfg.output == Config.DEFAULT_OUTPUT
    assert cfg.threshold == 10
    assert cfg.placeholder == '@PREFIX@'
    assert 'dhcp6-change' in cfg.events


def test_from_file():
    cfg = Config.from_file(io.StringIO('''[general]
template = /srv/radvd.tmpl
output = /srv/radvd.conf
pid_file = /srv/radvd.pid
threshold = 25
events = up down
placeholder = @DYNAMIC@
'''))
    assert cfg.template == '/srv/radvd.tmpl'
    assert cfg.output == '/srv/radvd.conf'
    assert cfg.pid_file == '/srv/radvd.pid'
    assert cfg.threshold == 25
    assert cfg.events == frozenset(['up', 'down'])
    assert cfg.placeholder == '@DYNAMIC@'


@pytest.mark.parametrize('text', [
    '[general]\nthreshold = ten\n',
    'no section header\n',
])
def test_invalid(text):
    with pytest.raises(ConfigException):
        Config.from_file(io.StringIO(text))


def test_load(tmp_path, monkeypatch):
    monkeypatch.setattr(Config, 'DEFAULT_PATH', str(tmp_path / 'missing.conf'))
    assert Config.load().output == Config.DEFAULT_OUTPUT

    with pytest.raises(ConfigException):
        Config.load(str(tmp_path / 'missing.conf'))

    path = tmp_path / 'radvd_dispatch.conf'
    path.write_text('[general]\noutput = /tmp/radvd.conf\n')
    assert Config.load(str(path)).output == '/tmp/radvd.conf'
