import re

from .error import PrintableError, error_context
from .functions import FUNCTION_PREFIX

# One single-quoted string literal. A quote inside a literal is written twice,
# so a literal only ends at a quote that isn't followed by another one.
# Without that rule a run of quotes could be split up exponentially many ways.
LITERAL = r"'(?:[^']|'')*'(?!')"

# Build files embed calls like ${svn::get-revision-number('.', '', '')}. We
# only claim expressions with our own prefix. Anything else inside ${...} is
# some other tool's business and is left exactly as it was.
EXPRESSION_RE = re.compile(
    r'\$\{\s*' + re.escape(FUNCTION_PREFIX) +
    r'::(?P<name>[A-Za-z0-9_-]+)\s*\(' +
    r"(?P<args>(?:[^')]|" + LITERAL + r")*)" +
    r'\)\s*\}')

LITERAL_RE = re.compile(r"\s*(" + LITERAL + r")\s*")


class ExpressionError(PrintableError):
    pass


def parse_arguments(args_str):
    '''Splits the argument list of an expression into plain strings.
    "'.', 'it''s'" becomes ['.', "it's"].'''
    if not args_str.strip():
        return []
    args = []
    pos = 0
    while True:
        match = LITERAL_RE.match(args_str, pos)
        if not match:
            raise ExpressionError('Expected a quoted string at {}: {}',
                                  pos, repr(args_str))
        args.append(match.group(1)[1:-1].replace("''", "'"))
        pos = match.end()
        if pos == len(args_str):
            return args
        if args_str[pos] != ',':
            raise ExpressionError('Expected a comma at {}: {}', pos,
                                  repr(args_str))
        pos += 1


def evaluate(expression, functions):
    match = EXPRESSION_RE.fullmatch(expression.strip())
    if not match:
        raise ExpressionError('Not a {}:: expression: {}', FUNCTION_PREFIX,
                              repr(expression))
    return _evaluate_match(match, functions)


def expand(text, functions):
    '''Replaces every svn:: expression in the text with its value. Each
    expression runs its own query, in the order they appear.'''
    return EXPRESSION_RE.sub(
        lambda match: _evaluate_match(match, functions), text)


def _evaluate_match(match, functions):
    with error_context(match.group(0)):
        args = parse_arguments(match.group('args'))
        return str(functions.call(match.group('name'), *args))
