from collections import namedtuple
import subprocess

from .error import ToolNotFound

ProcessResult = namedtuple('ProcessResult', ['returncode', 'output', 'errors'])


class SubprocessRunner:
    '''Runs a command to completion and hands back its exit status and
    captured text. This is the only place we actually start child processes.
    Anything else with a run() method of the same shape (like the fake runner
    in the tests) can stand in for it.'''

    def run(self, command, display_handle):
        # Entering and exiting the display handle lets the display know when
        # the job starts and stops.
        with display_handle:
            try:
                process = subprocess.Popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    universal_newlines=True)
            except OSError as e:
                # Missing file, no permission, a path through a regular file,
                # or something the OS can't execute at all.
                raise ToolNotFound(
                    "Couldn't start {}, is Subversion installed? ({})",
                    repr(command[0]), e.strerror) from e
            # communicate() reads stdout and stderr to the end, then waits for
            # the process to exit.
            output, errors = process.communicate()
            display_handle.write(output)
            display_handle.write(errors)
        return ProcessResult(process.returncode, output, errors)
