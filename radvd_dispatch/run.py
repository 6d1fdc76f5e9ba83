#!python3

import argparse
import logging
from . import DispatchException
from .config import Config
from .dispatcher import Dispatcher
from .probe import AddressProbe
from .notifier import RadvdNotifier


def dispatch(argv=None) -> int:
    """NetworkManager dispatcher hook: <interface> <event>"""

    parser = argparse.ArgumentParser(description='Regenerate radvd.conf from a template on interface events')
    parser.add_argument('-v', '--verbose', action='count', default=0)
    parser.add_argument('-d', '--debug', action='store_true', help='debug output, tracebacks of failures')
    parser.add_argument('-c', '--config', default=None, help='default: %s' % Config.DEFAULT_PATH)
    parser.add_argument('interface')
    parser.add_argument('event')
    args = parser.parse_args(argv)

    if args.debug or args.verbose > 1:
        level = logging.DEBUG
    elif args.verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level)

    logging.info('dispatch invoked, interface: %s, event: %s' % (args.interface, args.event))
    try:
        cfg = Config.load(args.config)
        dispatcher = Dispatcher(cfg, AddressProbe(), RadvdNotifier(cfg.pid_file))
        dispatcher.handle(args.interface, args.event)
    except DispatchException as err:
        if args.debug:
            logging.exception('dispatch failed: %s' % (err,))
        else:
            logging.error('dispatch failed: %s' % (err,))
        return 1
    return 0


if __name__ == '__main__':
    exit(dispatch())
