import re
import typing
import logging
import ipaddress
from . import DispatchException, DEFAULT_PLACEHOLDER
from .session import Session, MODE_SOURCE, INFINITY


RE_INTERFACE = re.compile(r'^interface(\s|{|$)', re.IGNORECASE)
RE_PREFIX = re.compile(r'^prefix(\s|{|$)', re.IGNORECASE)
RE_VALID_LIFETIME = re.compile(r'^AdvValidLifetime\s+([^\s;]+)', re.IGNORECASE)
RE_PREFERRED_LIFETIME = re.compile(r'^AdvPreferredLifetime\s+([^\s;]+)', re.IGNORECASE)
RE_DECREMENT_LIFETIMES = re.compile(r'^DecrementLifetimes\s+([^\s;]+)', re.IGNORECASE)
RE_SECONDS = re.compile(r'^(\d+)sec$', re.IGNORECASE)


class ParseException(DispatchException):
    pass


def normalize_lifetime(token: str) -> str:
    """'forever' -> 'infinity', '<n>sec' -> '<n>', anything else as is"""

    lowered = token.lower()
    if lowered in (INFINITY, 'forever'):
        return INFINITY
    match = RE_SECONDS.match(lowered)
    if match is not None:
        return match.group(1)
    return token


def header_token(line: str) -> typing.Optional[str]:
    """Second whitespace-delimited token of a block header, without the trailing '{' or ';'"""

    tokens = line.split()
    if len(tokens) < 2:
        return None
    token = tokens[1].rstrip('{;')
    return token or None


def leading_whitespace(line: str) -> str:
    return line[:len(line) - len(line.lstrip())]


class RadvdConfParser(object):
    """Line oriented reader of radvd configuration documents.

    TEXT -> INTERFACE -> PREFIX -> INTERFACE -> TEXT
    INTERFACE -> DYNAMIC -> INTERFACE (placeholder with a body, source template only)
    INTERFACE -> PLACEHOLDER -> DYNAMIC | INTERFACE (bare placeholder line, its '{' may follow)
    """

    STATE_TEXT = 'text'
    STATE_INTERFACE = 'interface'
    STATE_PREFIX = 'prefix'
    STATE_DYNAMIC = 'dynamic'
    STATE_PLACEHOLDER = 'placeholder'

    def __init__(self, session: Session, mode: str, name: str, placeholder: str = DEFAULT_PLACEHOLDER):
        self.session = session
        self.mode = mode
        self.name = name  # document name, for error messages
        self.placeholder = placeholder.lower()

        self.state = self.STATE_TEXT
        self.lineno = 0
        self.iface = None  # type: typing.Optional[str]
        self.iface_opened = False  # header '{' seen
        self.depth = 0  # opaque blocks nested in the current interface
        self.prefix = None  # type: typing.Optional[str]
        self.closed_prefix = None  # (lineno, prefix) of the last committed prefix block

        # accumulators of the prefix block being read
        self.valid = None  # type: typing.Optional[str]
        self.pref = None  # type: typing.Optional[str]
        self.decr = False
        self.has_decr = False

        self.transitions = {
            self.STATE_TEXT: self.parse_text,
            self.STATE_INTERFACE: self.parse_interface,
            self.STATE_PREFIX: self.parse_prefix,
            self.STATE_DYNAMIC: self.parse_dynamic,
            self.STATE_PLACEHOLDER: self.parse_placeholder,
        }  # type: typing.Dict[str, typing.Callable[[str, str], str]]

    def feed(self, raw_line: str) -> None:
        self.lineno += 1
        line = raw_line.strip()
        if not line:
            return
        if line.startswith('#') and self.state != self.STATE_DYNAMIC:
            return
        self.state = self.transitions[self.state](line, raw_line.rstrip('\r\n'))

    def close(self) -> None:
        if self.state == self.STATE_PLACEHOLDER:
            self.session.add_dynamic(self.iface)
            self.state = self.STATE_INTERFACE
        if self.state != self.STATE_TEXT:
            logging.warning('conf_parser %s: document ends inside %s block of interface %s' % (
                self.name, self.state, self.iface
            ))

    def fail(self, what: str) -> ParseException:
        return ParseException('%s:%d: cannot parse %s header' % (self.name, self.lineno, what))

    def clear_accumulators(self, decr: bool) -> None:
        self.valid = None
        self.pref = None
        self.decr = decr
        self.has_decr = False

    def accumulate(self, line: str) -> None:
        match = RE_VALID_LIFETIME.match(line)
        if match is not None:
            self.valid = normalize_lifetime(match.group(1))
            return
        match = RE_PREFERRED_LIFETIME.match(line)
        if match is not None:
            self.pref = normalize_lifetime(match.group(1))
            return
        match = RE_DECREMENT_LIFETIMES.match(line)
        if match is not None:
            self.decr = match.group(1).lower() == 'on'
            self.has_decr = True

    def match_placeholder(self, line: str) -> typing.Optional[str]:
        """Remainder of the line after the placeholder token, None if the line is not a placeholder"""

        if not line.lower().startswith(self.placeholder):
            return None
        rest = line[len(self.placeholder):].strip()
        if rest and rest[0] not in '{;':
            return None
        return rest

    def parse_text(self, line: str, raw_line: str) -> str:
        if RE_INTERFACE.match(line) is None:
            return self.STATE_TEXT

        iface = header_token(line)
        if iface is None:
            raise self.fail('interface')
        logging.debug('conf_parser %s: interface %s' % (self.name, iface))
        self.iface = iface
        self.iface_opened = '{' in line
        self.depth = 0
        self.session.mark_present(iface, self.mode)
        return self.STATE_INTERFACE

    def parse_interface(self, line: str, raw_line: str) -> str:
        if not self.iface_opened and line.startswith('{'):
            self.iface_opened = True
            return self.STATE_INTERFACE

        if self.depth == 0:
            if line.startswith('}'):
                self.iface = None
                return self.STATE_TEXT

            if RE_PREFIX.match(line) is not None:
                token = header_token(line)
                if token is None:
                    raise self.fail('prefix')
                try:
                    self.prefix = str(ipaddress.IPv6Network(token, strict=False))
                except ValueError:
                    raise self.fail('prefix')
                self.clear_accumulators(decr=False)
                return self.open_block(line, raw_line, self.STATE_PREFIX)

            rest = self.match_placeholder(line)
            if rest is not None:
                if self.mode != MODE_SOURCE:
                    logging.warning('conf_parser %s:%d: placeholder outside of the template, skipping' % (
                        self.name, self.lineno
                    ))
                elif rest.startswith('{'):
                    self.clear_accumulators(decr=True)
                    return self.open_block(rest, raw_line, self.STATE_DYNAMIC)
                elif rest:
                    self.session.add_dynamic(self.iface)
                    return self.STATE_INTERFACE
                else:
                    return self.STATE_PLACEHOLDER

        self.depth = max(0, self.depth + line.count('{') - line.count('}'))
        return self.STATE_INTERFACE

    def open_block(self, line: str, raw_line: str, state: str) -> str:
        """Feed directives written after the opening '{' to `state`, close the block if its '}' is there too"""

        _, brace, rest = line.partition('{')
        if not brace:
            return state
        body, closing, _ = rest.partition('}')
        indent = leading_whitespace(raw_line) + '    '
        for directive in body.split(';'):
            directive = directive.strip()
            if directive:
                state = self.transitions[state](directive + ';', indent + directive + ';')
        if closing:
            state = self.transitions[state]('}', '}')
        return state

    def parse_placeholder(self, line: str, raw_line: str) -> str:
        if line.startswith('{'):
            self.clear_accumulators(decr=True)
            return self.open_block(line, raw_line, self.STATE_DYNAMIC)

        # no body follows, a bare placeholder
        self.session.add_dynamic(self.iface)
        return self.parse_interface(line, raw_line)

    def parse_prefix(self, line: str, raw_line: str) -> str:
        if line.startswith('}'):
            self.session.add_prefix(
                self.iface, self.prefix, self.mode,
                valid=self.valid, pref=self.pref, decr=self.decr, has_decr=self.has_decr,
            )
            self.closed_prefix = (self.lineno, self.prefix)
            self.prefix = None
            return self.STATE_INTERFACE

        self.accumulate(line)
        return self.STATE_PREFIX

    def parse_dynamic(self, line: str, raw_line: str) -> str:
        if line.startswith('}'):
            self.session.add_dynamic(
                self.iface, valid=self.valid, pref=self.pref, decr=self.decr, has_decr=self.has_decr,
            )
            return self.STATE_INTERFACE

        self.accumulate(line)
        self.session.add_saved_line(self.iface, raw_line)
        return self.STATE_DYNAMIC


def parse_lines(
        session: Session, lines: typing.Iterable[str], mode: str, name: str,
        placeholder: str = DEFAULT_PLACEHOLDER,
) -> None:
    parser = RadvdConfParser(session, mode, name, placeholder)
    for line in lines:
        parser.feed(line)
    parser.close()


def parse_file(
        session: Session, path: str, mode: str,
        placeholder: str = DEFAULT_PLACEHOLDER, missing_ok: bool = False,
) -> None:
    logging.info('conf_parser reading %s as %s' % (path, mode))
    try:
        with open(path, 'rt') as conf_file:
            parse_lines(session, conf_file, mode, path, placeholder)
    except FileNotFoundError:
        if not missing_ok:
            raise ParseException('%s: file does not exist' % path)
        logging.info('conf_parser %s does not exist yet, nothing to compare with' % path)
    except (OSError, UnicodeDecodeError) as err:
        raise ParseException('%s: cannot read. Details: %s' % (path, err))
