from contextlib import contextmanager
import enum
from textwrap import indent


class PrintableError(Exception):
    def __init__(self, message, *args, **kwargs):
        self.message = message.format(*args, **kwargs)

    def __str__(self):
        return self.message

    def add_context(self, context):
        self.message = 'In {}:\n{}'.format(context, indent(self.message, '  '))


@contextmanager
def error_context(context):
    try:
        yield
    except PrintableError as e:
        e.add_context(context)
        raise


class ErrorKind(enum.Enum):
    TOOL_NOT_FOUND = 'tool-not-found'
    NOT_A_WORKING_COPY = 'not-a-working-copy'
    TOOL_EXECUTION_FAILED = 'tool-execution-failed'
    FIELD_NOT_FOUND = 'field-not-found'
    NUMERIC_PARSE_ERROR = 'numeric-parse-error'


class InfoError(PrintableError):
    '''Base class for everything that can go wrong in an info query. Callers
    can branch on the `kind` tag instead of matching message strings.'''
    kind = None


class ToolNotFound(InfoError):
    kind = ErrorKind.TOOL_NOT_FOUND


class NotAWorkingCopy(InfoError):
    kind = ErrorKind.NOT_A_WORKING_COPY

    def __init__(self, path):
        super().__init__('{} is not a working copy.', repr(path))
        self.path = path


class ToolExecutionFailed(InfoError):
    kind = ErrorKind.TOOL_EXECUTION_FAILED

    def __init__(self, command_line, returncode, errors=''):
        super().__init__('Command exited with error code {0}:\n$ {1}\n{2}',
                         returncode, command_line, errors)
        self.command_line = command_line
        self.returncode = returncode


class FieldNotFound(InfoError):
    kind = ErrorKind.FIELD_NOT_FOUND

    def __init__(self, field, output):
        super().__init__('Key {} was not found. Output:\n{}', repr(field),
                         output)
        self.field = field
        self.output = output


class NumericParseError(InfoError):
    kind = ErrorKind.NUMERIC_PARSE_ERROR

    def __init__(self, field, value):
        super().__init__('Field {} is not a number: {}', repr(field),
                         repr(value))
        self.field = field
        self.value = value
