import typing
import logging
import configparser
from . import DispatchException, DEFAULT_PLACEHOLDER
from .lifetime import DEFAULT_THRESHOLD


class ConfigException(DispatchException):
    pass


class Config(object):
    DEFAULT_PATH = '/etc/radvd_dispatch.conf'
    DEFAULT_TEMPLATE = '/etc/radvd.conf.tmpl'
    DEFAULT_OUTPUT = '/etc/radvd.conf'
    DEFAULT_PID_FILE = '/run/radvd.pid'
    DEFAULT_EVENTS = ('up', 'dhcp6-change', 'dhcp4-change', 'down')

    def __init__(
            self,
            template: str = DEFAULT_TEMPLATE,
            output: str = DEFAULT_OUTPUT,
            pid_file: str = DEFAULT_PID_FILE,
            threshold: int = DEFAULT_THRESHOLD,
            events: typing.Iterable[str] = DEFAULT_EVENTS,
            placeholder: str = DEFAULT_PLACEHOLDER,
    ):
        self.template = template
        self.output = output
        self.pid_file = pid_file
        self.threshold = threshold
        self.events = frozenset(events)
        self.placeholder = placeholder

    @classmethod
    def from_file(cls, f: typing.TextIO):
        try:
            cfg = configparser.ConfigParser()
            cfg.read_file(f)
            if not cfg.has_section('general'):
                return Config()
            cfg_general = cfg['general']
            threshold = cfg_general.getint('threshold', fallback=DEFAULT_THRESHOLD)
            events = cfg_general.get('events', fallback=None)
            return Config(
                template=cfg_general.get('template', fallback=cls.DEFAULT_TEMPLATE),
                output=cfg_general.get('output', fallback=cls.DEFAULT_OUTPUT),
                pid_file=cfg_general.get('pid_file', fallback=cls.DEFAULT_PID_FILE),
                threshold=threshold,
                events=events.split() if events is not None else cls.DEFAULT_EVENTS,
                placeholder=cfg_general.get('placeholder', fallback=DEFAULT_PLACEHOLDER),
            )
        except configparser.Error as err:
            raise ConfigException('Config parsing error', err)
        except ValueError as err:
            raise ConfigException('Config value error', err)

    @classmethod
    def load(cls, path: typing.Optional[str] = None):
        """Read `path`, or the default location where a missing file means defaults"""

        try:
            with open(path or cls.DEFAULT_PATH, 'rt') as f:
                return cls.from_file(f)
        except FileNotFoundError:
            if path is not None:
                raise ConfigException('Config file does not exist', path)
            logging.debug('config %s does not exist, using defaults' % cls.DEFAULT_PATH)
            return Config()
        except OSError as err:
            raise ConfigException('Config file is not readable', err)
