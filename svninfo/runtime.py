import os
import shutil

import yaml

from . import display
from .error import PrintableError
from .functions import SvnFunctions
from .info import QueryContext
from .process import SubprocessRunner

DEFAULT_CONFIG_FILE_NAME = 'svninfo.yaml'
DEFAULT_SVN_EXECUTABLE = 'svn'
SVN_ENV_VAR = 'SVNINFO_SVN'


class Runtime:
    '''Everything that gets decided once at startup: which svn to run, which
    extra arguments to give it, and how chatty to be.'''

    def __init__(self, args, env, *, runner=None, output=None):
        if args['--quiet'] and args['--verbose']:
            raise CommandLineError(
                "svninfo can't be quiet and verbose at the same time.")
        self.verbose = args['--verbose']
        self.display = get_display(args, output)

        self.config_file = _find_config_file(args)
        config = load_config(self.config_file) if self.config_file else {}

        self.executable = resolve_executable(
            args['--svn'] or env.get(SVN_ENV_VAR) or config.get('svn')
            or DEFAULT_SVN_EXECUTABLE)
        self.extra_args = tuple(config.get('args', ()))

        self.context = QueryContext(
            executable=self.executable,
            runner=runner or SubprocessRunner(),
            display=self.display,
            extra_args=self.extra_args)
        self.functions = SvnFunctions(self.context)

    def print_settings(self):
        '''Tells a verbose user where the svn command line is coming from.'''
        if not self.verbose:
            return
        self.display.print('config file: {}'.format(self.config_file or
                                                    '(none)'))
        self.display.print('svn: {}'.format(self.executable))
        if self.extra_args:
            self.display.print('extra svn args: ' +
                               ' '.join(self.extra_args))


def resolve_executable(name):
    '''Looks the executable up on the PATH once, so that every query runs the
    same binary. If it can't be found we keep the name as given and let the
    first query report it.'''
    return shutil.which(name) or name


def load_config(path):
    try:
        with open(path) as f:
            blob = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError('YAML parser error in {}:\n\n{}', path, e) from e
    if blob is None:
        return {}
    if not isinstance(blob, dict):
        raise ConfigError('{} must contain a mapping, not {}', path,
                          type(blob).__name__)
    config = {}
    svn = blob.pop('svn', None)
    if svn is not None:
        if not isinstance(svn, str) or not svn:
            raise ConfigError('"svn" in {} must be a non-empty string.', path)
        config['svn'] = svn
    args = blob.pop('args', None)
    if args is not None:
        if (not isinstance(args, list)
                or not all(isinstance(arg, str) for arg in args)):
            raise ConfigError('"args" in {} must be a list of strings.', path)
        config['args'] = args
    if blob:
        raise ConfigError('Unknown fields in {}: {}', path,
                          ', '.join(str(key) for key in blob))
    return config


def find_config_file(start_dir, basename):
    '''Walk up the directory tree until we find a file of the given name.
    Returns None if there isn't one.'''
    prefix = os.path.abspath(start_dir)
    while True:
        candidate = os.path.join(prefix, basename)
        if os.path.isfile(candidate):
            return candidate
        if os.path.exists(candidate):
            raise ConfigError("Found {}, but it's not a file.", candidate)
        if os.path.dirname(prefix) == prefix:
            # We've walked all the way to the top.
            return None
        prefix = os.path.dirname(prefix)


def _find_config_file(args):
    explicit = args['--config']
    if explicit:
        if not os.path.isfile(explicit):
            raise ConfigError("Can't find config file {}", explicit)
        return explicit
    return find_config_file(os.getcwd(), DEFAULT_CONFIG_FILE_NAME)


def get_display(args, output=None):
    if args['--verbose']:
        return display.VerboseDisplay(output)
    else:
        return display.QuietDisplay(output)


class CommandLineError(PrintableError):
    pass


class ConfigError(PrintableError):
    pass
