import typing
import logging
from .session import Session, DYNAMIC, INFINITY, MODE_SOURCE, MODE_CURRENT, MODE_WIRED


DEFAULT_THRESHOLD = 10

FIELD_VALID = 'valid'
FIELD_PREFERRED = 'pref'
FIELDS = (FIELD_VALID, FIELD_PREFERRED)


class Action(object):
    NONE = 'none'
    RESET = 'reset'  # restart lifetime countdowns only
    RELOAD = 'reload'  # regenerate the file and have radvd re-read it


class Decision(object):
    def __init__(self):
        self.action = Action.NONE
        self.changed = list()  # type: typing.List[str]
        self.decrementing = False  # one of the changed interfaces decrements lifetimes

    def __repr__(self):
        return '<Decision %s changed=%s decrementing=%s>' % (self.action, self.changed, self.decrementing)


def differ(a, b, threshold=DEFAULT_THRESHOLD) -> bool:
    """True when two lifetimes differ significantly.

    Numeric values are compared by their difference relative to their mean, in percent;
    exactly `threshold` percent is not a significant difference.
    """

    if a is None or b is None:
        return a is not b
    a, b = str(a), str(b)
    if a == INFINITY or b == INFINITY:
        return a != b
    try:
        a_num, b_num = int(a), int(b)
    except ValueError:
        return a != b
    if a_num + b_num == 0:
        return False
    # 200 * |a - b| / (a + b) > threshold, kept in integers
    return 200 * abs(a_num - b_num) > threshold * (a_num + b_num)


def resolve(session: Session, iface: str, prefix: str, field: str) -> typing.Optional[str]:
    """Effective lifetime: static declaration > placeholder declaration > live value"""

    for value in (
            session.prefix_get(iface, prefix, '%s_%s' % (MODE_SOURCE, field)),
            session.prefix_get(iface, DYNAMIC, '%s_%s' % (MODE_SOURCE, field)),
            session.prefix_get(iface, prefix, '%s_%s' % (MODE_WIRED, field)),
    ):
        if value is not None:
            return value
    return None


def published(session: Session, iface: str, prefix: str, field: str) -> typing.Optional[str]:
    """Lifetime the generated file carries for the prefix, None when left to the radvd default"""

    if session.prefix_get(iface, prefix, MODE_SOURCE):
        declared = session.prefix_get(iface, prefix, '%s_%s' % (MODE_SOURCE, field))
        if declared is not None or not session.decrements(iface, prefix):
            return declared
    return resolve(session, iface, prefix, field)


def check_interface(session: Session, iface: str, threshold=DEFAULT_THRESHOLD) -> str:
    if session.is_present(iface, MODE_SOURCE) != session.is_present(iface, MODE_CURRENT):
        logging.info('lifetime %s: interface appeared or vanished' % iface)
        return Action.RELOAD

    dynamic = session.is_dynamic(iface)
    action = Action.NONE
    for prefix in session.prefixes(iface):
        static = bool(session.prefix_get(iface, prefix, MODE_SOURCE))
        expected = static or (dynamic and bool(session.prefix_get(iface, prefix, MODE_WIRED)))
        present = bool(session.prefix_get(iface, prefix, MODE_CURRENT))

        if not expected and not present:
            continue
        if not present:
            logging.info('lifetime %s: prefix %s is new' % (iface, prefix))
            return Action.RELOAD
        if not expected:
            logging.info('lifetime %s: prefix %s is stale' % (iface, prefix))
            return Action.RELOAD

        decr = session.decrements(iface, prefix)
        if decr != bool(session.prefix_get(iface, prefix, '%s_decr' % MODE_CURRENT)):
            logging.info('lifetime %s: prefix %s decrementing changed to %s' % (iface, prefix, decr))
            return Action.RELOAD

        for field in FIELDS:
            value = published(session, iface, prefix, field)
            current = session.prefix_get(iface, prefix, '%s_%s' % (MODE_CURRENT, field))
            if not differ(value, current, threshold):
                logging.debug('lifetime %s: prefix %s %s %s ~ %s' % (iface, prefix, field, value, current))
                continue
            logging.info('lifetime %s: prefix %s %s drifted %s -> %s' % (iface, prefix, field, current, value))
            if static and decr:
                action = Action.RESET
            else:
                return Action.RELOAD

    return action


def check(session: Session, threshold=DEFAULT_THRESHOLD) -> Decision:
    decision = Decision()
    for iface in session.interfaces():
        action = check_interface(session, iface, threshold)
        if action == Action.NONE:
            continue
        decision.changed.append(iface)
        if session.is_decrementing(iface):
            decision.decrementing = True
        if action == Action.RELOAD or decision.action == Action.NONE:
            decision.action = action
    logging.info('lifetime decision: %s' % decision)
    return decision
