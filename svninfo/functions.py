import inspect
import re

from .error import NumericParseError, PrintableError
from .info import query_info

FUNCTION_PREFIX = 'svn'


def svn_function(name):
    def decorator(f):
        FUNCTIONS[name] = f
        return f

    return decorator


FUNCTIONS = {}


class UnknownFunction(PrintableError):
    pass


class ArgumentCountError(PrintableError):
    pass


class SvnFunctions:
    '''The functions a build script can call as `svn::<name>(...)`. Every call
    runs its own `svn info`; nothing is cached between calls.

    All of them take optional username and password arguments, which are
    passed through to svn when they're not empty.'''

    def __init__(self, context):
        self.context = context

    def call(self, name, *args):
        if name not in FUNCTIONS:
            raise UnknownFunction('Unknown function: {}::{}', FUNCTION_PREFIX,
                                  name)
        function = FUNCTIONS[name]
        try:
            inspect.signature(function).bind(self, *args)
        except TypeError:
            raise ArgumentCountError(
                '{}::{} takes {}, got {} argument{}', FUNCTION_PREFIX, name,
                describe_arguments(function), len(args),
                '' if len(args) == 1 else 's') from None
        return function(self, *args)

    def _info(self, path, username, password):
        arguments = {'username': username, 'password': password}
        return query_info(self.context, path, arguments)

    @svn_function('get-revision-number')
    def get_revision_number(self, path, username='', password=''):
        value = self._info(path, username, password).field('Revision')
        # int() alone would also accept things like "1_000".
        if not re.fullmatch('-?[0-9]+', value):
            raise NumericParseError('Revision', value)
        return int(value)

    @svn_function('get-repository-root')
    def get_repository_root(self, path, username='', password=''):
        return self._info(path, username, password).field('Repository Root')

    @svn_function('get-repository-url')
    def get_repository_url(self, path, username='', password=''):
        return self._info(path, username, password).field('URL')

    @svn_function('get-last-changed-author')
    def get_last_changed_author(self, path, username='', password=''):
        info = self._info(path, username, password)
        return info.field('Last Changed Author')


def describe_arguments(function):
    '''Renders a function's arguments for help output, like
    "path, [username], [password]".'''
    params = list(inspect.signature(function).parameters.values())[1:]
    return ', '.join(
        p.name if p.default is inspect.Parameter.empty else
        '[{}]'.format(p.name) for p in params)
