import io
import os
import stat
import sys
import textwrap
import unittest

from svninfo import display, error
from svninfo.process import SubprocessRunner

import shared


def python_command(script):
    return [sys.executable, '-c', textwrap.dedent(script)]


class SubprocessRunnerTest(shared.SvnInfoTest):
    def setUp(self):
        self.output = io.StringIO()
        self.display = display.VerboseDisplay(self.output)
        self.runner = SubprocessRunner()

    def run_command(self, command):
        return self.runner.run(command, self.display.get_handle('job'))

    def test_captures_stdout_and_stderr(self):
        result = self.run_command(python_command('''\
            import sys
            print('Revision: 7')
            print('warning', file=sys.stderr)
            '''))
        self.assertEqual(0, result.returncode)
        self.assertEqual('Revision: 7\n', result.output)
        self.assertEqual('warning\n', result.errors)

    def test_nonzero_exit_is_returned_not_raised(self):
        result = self.run_command(python_command('''\
            import sys
            sys.exit(3)
            '''))
        self.assertEqual(3, result.returncode)
        self.assertEqual('', result.output)

    def test_stdin_is_closed(self):
        result = self.run_command(python_command('''\
            import sys
            print(repr(sys.stdin.read()))
            '''))
        self.assertEqual("''\n", result.output)

    def test_output_goes_to_display(self):
        self.run_command(python_command('''\
            print('Revision: 7')
            '''))
        self.assertIn('Revision: 7\n', self.output.getvalue())
        self.assertSetEqual(set(), self.display.outstanding_jobs)

    def test_missing_executable(self):
        missing = os.path.join(shared.create_dir(), 'no-such-svn')
        with self.assertRaises(error.ToolNotFound) as cm:
            self.run_command([missing, 'info', '.'])
        self.assertIs(error.ErrorKind.TOOL_NOT_FOUND, cm.exception.kind)
        self.assertIn('no-such-svn', cm.exception.message)
        # The display job is finished even though nothing ran.
        self.assertSetEqual(set(), self.display.outstanding_jobs)

    @unittest.skipIf(os.name == 'nt', 'relies on the executable bit')
    def test_executable_the_os_cannot_run(self):
        not_a_program = os.path.join(shared.create_dir(), 'svn')
        with open(not_a_program, 'wb') as f:
            f.write(b'\x00\x01garbage')
        os.chmod(not_a_program,
                 os.stat(not_a_program).st_mode | stat.S_IXUSR)
        with self.assertRaises(error.ToolNotFound):
            self.run_command([not_a_program, 'info', '.'])
        self.assertSetEqual(set(), self.display.outstanding_jobs)

    @unittest.skipIf(os.name == 'nt', 'reports a different error on Windows')
    def test_path_through_a_regular_file(self):
        test_dir = shared.create_dir({'file': 'not a dir'})
        with self.assertRaises(error.ToolNotFound):
            self.run_command([os.path.join(test_dir, 'file', 'svn'), 'info',
                              '.'])
