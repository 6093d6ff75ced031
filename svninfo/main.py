#! /usr/bin/env python3

import collections
import json
import os
import sys

import docopt

from . import display
from .error import PrintableError
from . import expression
from .functions import FUNCTION_PREFIX, FUNCTIONS, describe_arguments
from .info import query_info
from .runtime import Runtime

MODULE_ROOT = os.path.abspath(os.path.dirname(__file__))

__doc__ = '''\
Usage:
    svninfo [-hqv] [--svn=<exe>] [--config=<file>] <command> [<args>...]
    svninfo [--help|--version]

Commands:
    call       call one svn:: function and print the result
    info       print every field `svn info` reports for a working copy
    expand     replace ${svn::...} expressions in a file with their values
    functions  list the functions you can call
    help       show help for subcommands, same as -h/--help

Options:
    -h --help             so much help
    -q --quiet            don't print anything but results
    -v --verbose          print every svn command and its output

    --svn=<exe>
        The svn executable to run. Defaults to $SVNINFO_SVN, then to the
        "svn" field of svninfo.yaml, then to "svn" on your PATH.
    --config=<file>
        The config file to use instead of searching the current dir and its
        parents for 'svninfo.yaml'.
'''


def svninfo_command(name, doc):
    def decorator(f):
        COMMAND_FNS[name] = f
        COMMAND_DOCS[name] = doc
        return f

    return decorator


COMMAND_FNS = {}
COMMAND_DOCS = {}


@svninfo_command('call', '''\
Usage:
    svninfo call [-hqv] <function> [--] [<args>...]
    svninfo call --help

Calls a function the same way a build script would, and prints what it
returns. The function name is given without the svn:: prefix, and the
arguments are plain strings. For example:

    svninfo call get-revision-number . myname mypassword

Empty arguments are fine, and a missing username or password is the
same as an empty one. Run `svninfo functions` to see what's available.

Options:
    -h --help     one function at a time, please
    -q --quiet    don't print anything but the result
    -v --verbose  print the svn command and its output
''')
def do_call(params):
    name = params.args['<function>']
    result = params.runtime.functions.call(name, *params.args['<args>'])
    print(result)


@svninfo_command('info', '''\
Usage:
    svninfo info [-hqv] [--json] [--username=<user>] [--password=<pass>]
                 <path>
    svninfo info --help

Runs `svn info` on a working copy and prints every field it reports, one
`key: value` per line. The four functions only ever look at one of
these, but it's handy to see what's there.

Options:
    -h --help            inform yourself
    --json               print output as a JSON object
    --username=<user>    passed to svn as --username
    --password=<pass>    passed to svn as --password
    -q --quiet           don't print anything but the fields
    -v --verbose         print the svn command and its output
''')
def do_info(params):
    arguments = collections.OrderedDict([
        ('username', params.args['--username']),
        ('password', params.args['--password']),
    ])
    record = query_info(params.runtime.context, params.args['<path>'],
                        arguments)
    if params.args['--json']:
        print(json.dumps(record, indent=2))
    else:
        for key, value in record.items():
            print('{}: {}'.format(key, value))


@svninfo_command('expand', '''\
Usage:
    svninfo expand [-hqv] [<file>] [--output=<file>]

Reads a file (or stdin if no file is given) and replaces each expression
like ${svn::get-repository-url('.')} with its value. Everything else,
including expressions that don't start with svn::, is copied as is.
Relative paths inside expressions are relative to the directory you run
svninfo from, not to the file.

Options:
    -h --help          expand your mind
    --output=<file>    write the result here instead of to stdout
    -q --quiet         don't print anything but the result
    -v --verbose       print every svn command and its output
''')
def do_expand(params):
    if params.args['<file>']:
        with open(params.args['<file>']) as f:
            text = f.read()
    else:
        text = sys.stdin.read()
    result = expression.expand(text, params.runtime.functions)
    if params.args['--output']:
        with open(params.args['--output'], 'w') as f:
            f.write(result)
    else:
        sys.stdout.write(result)


@svninfo_command('functions', '''\
Usage:
    svninfo functions [-h] [--json]

Lists the functions you can call, with their arguments.

Options:
    -h --help  there are only four of them
    --json     print output as JSON
''')
def do_functions(params):
    names = sorted(FUNCTIONS)
    if params.args['--json']:
        print(json.dumps(names))
    else:
        for name in names:
            print('{}::{}({})'.format(FUNCTION_PREFIX, name,
                                      describe_arguments(FUNCTIONS[name])))


def get_version():
    '''The release number lives in the VERSION file next to this module, so
    setup.py and `svninfo --version` read the same string.'''
    version_file = os.path.join(MODULE_ROOT, 'VERSION')
    with open(version_file) as f:
        return f.read().strip()


def print_error(message, *, quiet=False):
    '''Reports a failed query on stderr, so a broken ${svn::...} value never
    ends up mixed into expanded output. Quiet mode prints nothing; the exit
    status alone says the query failed.'''
    if quiet:
        return
    if not message.endswith('\n'):
        message += '\n'
    if display.is_fancy_terminal(sys.stderr):
        message = '\x1b[31m' + message + '\x1b[39m'
    sys.stderr.write(message)


def maybe_print_help_and_return(args):
    '''Handles --version, `help [<command>]` and --help before any svn
    settings are resolved. Returns an exit status when the invocation was a
    request for information, or None when a real command should run.'''
    if args['--version']:
        print(get_version())
        return 0

    wants_help = args['--help']
    command = args['<command>']
    if command == 'help':
        wants_help = True
        help_args = args['<args>']
        command = help_args[0] if help_args else None

    if command is None:
        print(__doc__, end='')
        return 0

    # Misspelled commands get the command list, as an error.
    if command not in COMMAND_DOCS:
        print(__doc__, end='', file=sys.stderr)
        return 1

    if wants_help:
        print(COMMAND_DOCS[command], end='')
        return 0

    return None


def merged_args_dicts(global_args, subcommand_args):
    '''Combines the toplevel parse with the parse of one command's own
    usage. Flags like -q and -v are accepted in both places, and a flag given
    before the command must stay on even though the command parse reports it
    as False.'''
    merged = global_args.copy()
    for key, val in subcommand_args.items():
        if key not in merged:
            merged[key] = val
        elif type(merged[key]) is type(val) is bool:
            merged[key] = merged[key] or val
        elif key == '<args>':
            # The command parse owns the positional args. The toplevel list
            # is just the unparsed remainder of the command line.
            merged[key] = val
        else:
            raise RuntimeError("Unmergable args.")
    return merged


def docopt_parse_args(argv):
    '''Parses the toplevel usage, then the chosen command's usage on the
    rest of argv.'''
    args = docopt.docopt(__doc__, argv, help=False, options_first=True)
    command = args['<command>']
    # Unknown commands and `help <command>` have no usage of their own to
    # parse, and `svninfo --help call` must not fail on call's missing
    # <function>. Those are settled by maybe_print_help_and_return.
    if command in COMMAND_DOCS and not args['--help']:
        command_doc = COMMAND_DOCS[command]
        command_argv = [command] + args['<args>']
        command_args = docopt.docopt(command_doc, command_argv, help=False)
        args = merged_args_dicts(args, command_args)
    return args


CommandParams = collections.namedtuple('CommandParams', ['args', 'runtime'])


# Called as a setup.py entry point, or from __main__.py (`python3 -m svninfo`).
def main(*, argv=None, env=None, nocatch=False, runner=None):
    if argv is None:
        argv = sys.argv[1:]
    if env is None:
        env = os.environ.copy()

    args = docopt_parse_args(argv)
    command = args['<command>']

    ret = maybe_print_help_and_return(args)
    if ret is not None:
        return ret

    try:
        runtime = Runtime(args, env, runner=runner)
        runtime.print_settings()
        params = CommandParams(args, runtime)
        command_fn = COMMAND_FNS[command]
        command_fn(params)
    except PrintableError as e:
        if args['--verbose'] or nocatch:
            # A verbose run shows the traceback, and tests want the exception.
            raise
        print_error(e.message, quiet=args['--quiet'])
        return 1
