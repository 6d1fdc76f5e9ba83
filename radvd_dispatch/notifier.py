import os
import signal
import typing
import logging


class RadvdNotifier(object):
    """Signals a running radvd. SIGHUP re-reads the configuration, SIGUSR1 resets decrementing lifetimes."""

    def __init__(self, pid_file_path: str):
        self.pid_file_path = pid_file_path

    def pid(self) -> typing.Optional[int]:
        try:
            with open(self.pid_file_path, 'r') as pid_file:
                return int(pid_file.read().strip())
        except (OSError, ValueError):
            return None

    def send_signal(self, signum: int) -> bool:
        pid = self.pid()
        if pid is None:
            logging.debug('notifier no radvd pid in %s, not signalling' % self.pid_file_path)
            return False
        try:
            os.kill(pid, signum)
        except ProcessLookupError:
            logging.debug('notifier radvd %d is not running, not signalling' % pid)
            return False
        except PermissionError:
            logging.error('notifier not allowed to signal radvd %d' % pid)
            return False
        logging.info('notifier radvd %d signalled with %s' % (pid, signal.Signals(signum).name))
        return True

    def reload(self) -> bool:
        return self.send_signal(signal.SIGHUP)

    def reset(self) -> bool:
        return self.send_signal(signal.SIGUSR1)
