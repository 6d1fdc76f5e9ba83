import typing
import logging
from .config import Config
from .session import Session, MODE_SOURCE, MODE_CURRENT
from .lifetime import Action, Decision, check
from . import conf_parser
from . import conf_builder


class Dispatcher(object):
    """One regeneration run per interface event.

    template -> current file -> live prefixes -> decision -> nothing | reset | rebuild + reload
    """

    def __init__(self, cfg: Config, probe, notifier):
        self.cfg = cfg
        self.probe = probe  # .probe(iface) -> [(prefix, valid, preferred)]
        self.notifier = notifier  # .reload(), .reset()

    def handle(self, iface: str, event: str) -> typing.Optional[Decision]:
        if event not in self.cfg.events:
            logging.info('dispatcher event "%s" on %s ignored' % (event, iface))
            return None
        logging.info('dispatcher event "%s" on %s' % (event, iface))
        return self.run()

    def run(self) -> Decision:
        session = Session()
        conf_parser.parse_file(session, self.cfg.template, MODE_SOURCE, self.cfg.placeholder)
        conf_parser.parse_file(session, self.cfg.output, MODE_CURRENT, self.cfg.placeholder, missing_ok=True)
        self.update_wired(session)

        decision = check(session, self.cfg.threshold)
        if decision.action == Action.NONE:
            logging.info('dispatcher nothing changed')
        elif decision.action == Action.RESET:
            logging.info('dispatcher resetting lifetimes, changed: %s' % decision.changed)
            self.notifier.reset()
        else:
            logging.info('dispatcher regenerating %s, changed: %s' % (self.cfg.output, decision.changed))
            content = conf_builder.build_file(session, self.cfg.template, self.cfg.placeholder)
            conf_builder.write_atomic(self.cfg.output, content)
            self.notifier.reload()
            if decision.decrementing:
                self.notifier.reset()
        return decision

    def update_wired(self, session: Session) -> None:
        for iface in list(session.interfaces()):
            if not session.is_dynamic(iface):
                continue
            addresses = self.probe.probe(iface)
            if not addresses:
                logging.info('dispatcher %s has no live prefixes' % iface)
            for prefix, valid, preferred in addresses:
                session.add_wired(iface, prefix, valid, preferred)
