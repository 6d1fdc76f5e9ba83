import os
import os.path
import typing
import shutil
import logging
import tempfile
import jinja2
from . import DispatchException, DEFAULT_PLACEHOLDER
from .session import Session, DYNAMIC, MODE_SOURCE
from .conf_parser import RadvdConfParser, leading_whitespace
from .lifetime import FIELD_VALID, FIELD_PREFERRED, resolve, published


template = '''{{ indent }}prefix {{ prefix }} {
{% if decrement %}
{{ body_indent }}DecrementLifetimes on;
{% endif %}
{% if valid is not none %}
{{ body_indent }}AdvValidLifetime {{ valid }};
{% endif %}
{% if preferred is not none %}
{{ body_indent }}AdvPreferredLifetime {{ preferred }};
{% endif %}
{% for line in saved %}
{{ line }}
{% endfor %}
{{ indent }}};
'''

DIRECTIVES = {
    FIELD_VALID: 'AdvValidLifetime',
    FIELD_PREFERRED: 'AdvPreferredLifetime',
}


class BuildException(DispatchException):
    pass


def build_dynamic(session: Session, iface: str, indent: str) -> str:
    """One prefix block per live prefix of the interface that the template does not declare itself"""

    decrement = session.dynamic_decrements(iface) and not session.prefix_get(iface, DYNAMIC, 'src_has_decr')
    saved = session.saved_lines(iface)
    # synthesized directives line up with the placeholder body
    body_indent = leading_whitespace(saved[0]) if saved else indent + '    '

    blocks = list()
    for prefix in session.wired_prefixes(iface):
        if session.prefix_get(iface, prefix, MODE_SOURCE):
            logging.debug('conf_builder %s: %s is declared in the template, not synthesizing' % (iface, prefix))
            continue
        lifetimes = dict()
        for field in (FIELD_VALID, FIELD_PREFERRED):
            if session.prefix_get(iface, DYNAMIC, 'src_%s' % field) is not None:
                lifetimes[field] = None  # the placeholder body carries it
            else:
                lifetimes[field] = resolve(session, iface, prefix, field)
        blocks.append(jinja2.Template(template, trim_blocks=True, keep_trailing_newline=True).render({
            'indent': indent,
            'body_indent': body_indent,
            'prefix': prefix,
            'decrement': decrement,
            'valid': lifetimes[FIELD_VALID],
            'preferred': lifetimes[FIELD_PREFERRED],
            'saved': saved,
        }))
    logging.info('conf_builder %s: %d dynamic prefixes' % (iface, len(blocks)))
    return ''.join(blocks)


def build_missing_lifetimes(session: Session, iface: str, prefix: str, indent: str) -> typing.List[str]:
    """Lifetimes a decrementing static prefix leaves unspecified"""

    if not session.decrements(iface, prefix):
        return []
    lines = list()
    for field in (FIELD_VALID, FIELD_PREFERRED):
        if session.prefix_get(iface, prefix, 'src_%s' % field) is not None:
            continue
        value = published(session, iface, prefix, field)
        if value is not None:
            lines.append('%s%s %s;\n' % (indent, DIRECTIVES[field], value))
    return lines


def insert_inline(raw_line: str, lines: typing.List[str]) -> str:
    """Put directives in front of the closing '}' of a block written on one line"""

    if not lines:
        return raw_line
    at = raw_line.rfind('}')
    return '%s%s %s' % (raw_line[:at], ' '.join(line.strip() for line in lines), raw_line[at:])


def build(
        session: Session, template_lines: typing.Iterable[str],
        name: str = 'template', placeholder: str = DEFAULT_PLACEHOLDER,
) -> str:
    # the parser is only used to follow the block structure, its facts are thrown away
    tracker = RadvdConfParser(Session(), MODE_SOURCE, name, placeholder)
    output = list()  # type: typing.List[str]
    body_indent = None

    for raw_line in template_lines:
        if not raw_line.endswith('\n'):
            raw_line += '\n'
        line = raw_line.strip()
        state, iface, prefix = tracker.state, tracker.iface, tracker.prefix

        if state == RadvdConfParser.STATE_PLACEHOLDER and line and not line.startswith('#'):
            if line.startswith('{'):
                # placeholder body opening on its own line, replayed inside every synthesized block
                tracker.feed(raw_line)
                continue
            state = RadvdConfParser.STATE_INTERFACE

        is_placeholder = (
            state == RadvdConfParser.STATE_INTERFACE and tracker.depth == 0 and
            bool(line) and tracker.match_placeholder(line) is not None
        )
        tracker.feed(raw_line)

        if is_placeholder:
            output.append(build_dynamic(session, iface, leading_whitespace(raw_line)))
            continue
        if state == RadvdConfParser.STATE_DYNAMIC:
            # placeholder body, replayed inside every synthesized block
            continue

        if state == RadvdConfParser.STATE_INTERFACE:
            if tracker.state == RadvdConfParser.STATE_PREFIX:
                body_indent = None
            elif tracker.closed_prefix is not None and tracker.closed_prefix[0] == tracker.lineno:
                # prefix block opened and closed on this line
                raw_line = insert_inline(raw_line, build_missing_lifetimes(
                    session, iface, tracker.closed_prefix[1], ''
                ))
        elif state == RadvdConfParser.STATE_PREFIX:
            if tracker.state == RadvdConfParser.STATE_INTERFACE:
                if body_indent is None:
                    body_indent = leading_whitespace(raw_line) + '    '
                output.extend(build_missing_lifetimes(session, iface, prefix, body_indent))
            elif body_indent is None and line and not line.startswith('{'):
                body_indent = leading_whitespace(raw_line)

        output.append(raw_line)

    return ''.join(output)


def build_file(session: Session, template_path: str, placeholder: str = DEFAULT_PLACEHOLDER) -> str:
    try:
        with open(template_path, 'rt') as template_file:
            return build(session, template_file, template_path, placeholder)
    except (OSError, UnicodeDecodeError) as err:
        raise BuildException('%s: cannot read the template. Details: %s' % (template_path, err))


def write_atomic(path: str, content: str) -> None:
    """Replace `path` with `content`, the old file stays in place if anything fails"""

    directory = os.path.dirname(os.path.abspath(path))
    try:
        fd, scratch_path = tempfile.mkstemp(prefix='.%s.' % os.path.basename(path), dir=directory)
    except OSError as err:
        raise BuildException('cannot create a scratch file in %s. Details: %s' % (directory, err))

    try:
        with os.fdopen(fd, 'wt') as scratch_file:
            scratch_file.write(content)
            scratch_file.flush()
            os.fsync(scratch_file.fileno())
        try:
            shutil.copymode(path, scratch_path)
        except FileNotFoundError:
            os.chmod(scratch_path, 0o644)
        os.replace(scratch_path, path)
    except OSError as err:
        try:
            os.unlink(scratch_path)
        except OSError:
            pass
        raise BuildException('cannot write %s. Details: %s' % (path, err))
    logging.info('conf_builder %s written' % path)
