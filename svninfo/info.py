from collections import namedtuple
import re

from .error import FieldNotFound, NotAWorkingCopy, ToolExecutionFailed

# A field name is everything up to the first colon on a line. Values are
# trimmed when they're stored. Lines with no colon, like the blank line at the
# end of `svn info` output, don't match at all.
INFO_LINE_RE = re.compile(r'^(?P<key>[^:\n]*):(?P<value>.*)$', re.MULTILINE)

NOT_A_WORKING_COPY_MESSAGE = 'is not a working copy'

QueryContext = namedtuple('QueryContext',
                          ['executable', 'runner', 'display', 'extra_args'])


class InfoRecord(dict):
    '''The fields from one `svn info` run. Holds on to the raw output, so that
    a missing field can be reported along with what we actually got.'''

    def __init__(self, fields=(), output=''):
        super().__init__(fields)
        self.output = output

    def field(self, name):
        try:
            return self[name]
        except KeyError:
            raise FieldNotFound(name, self.output) from None


def parse_info(output):
    output = output.replace('\r\n', '\n')
    record = InfoRecord(output=output)
    for match in INFO_LINE_RE.finditer(output):
        # Later lines win if a key shows up twice.
        record[match.group('key')] = match.group('value').strip()
    return record


def info_command(executable, path, arguments=None, extra_args=()):
    if path.startswith('-'):
        # Otherwise svn would read a path like "--version" as an option.
        path = './' + path
    command = [executable, 'info', path]
    for key, value in (arguments or {}).items():
        # Leave out empty options entirely, rather than passing `--username ''`
        # and having svn try to use it.
        if value:
            command.extend(['--' + key, value])
    command.extend(extra_args)
    return command


def query_info(context, path, arguments=None):
    # `svn info` with no path at all would describe the current directory,
    # which is never what an empty argument meant.
    if not path:
        raise NotAWorkingCopy(path)
    command = info_command(context.executable, path, arguments,
                           context.extra_args)
    title = _command_title(command)
    handle = context.display.get_handle(title)
    result = context.runner.run(command, handle)
    if result.returncode != 0:
        # svn prints this as a warning on stderr and then fails with a generic
        # error code, so the message is all we have to go on.
        if (NOT_A_WORKING_COPY_MESSAGE in result.output
                or NOT_A_WORKING_COPY_MESSAGE in result.errors):
            raise NotAWorkingCopy(path)
        raise ToolExecutionFailed(title, result.returncode, result.errors)
    return parse_info(result.output)


def _command_title(command):
    # Keep passwords out of the display.
    title = []
    hide_next = False
    for arg in command:
        title.append('********' if hide_next else arg)
        hide_next = arg == '--password'
    return ' '.join(title)
