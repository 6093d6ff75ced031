import io
import os
import sys
import threading

# The display classes deal with output from the svn subprocesses we run. The
# VerboseDisplay collects output from each job and prints it all when the job
# is finished, in a way that's suitable for logs. The QuietDisplay prints
# nothing but what callers explicitly print().
#
# Both display types inherit from BaseDisplay and provide the same interface.
# Callers use get_handle() to get a display handle for each subprocess job
# that's going to run. The handle is used as a context manager (inside a with
# statement) to indicate when the job is starting and stopping, and all of the
# output from the subprocess is passed to the handle's write() method.
#
# Errors are not the display's business. They're raised as PrintableErrors and
# reported by main.


class BaseDisplay:
    def __init__(self, output=None):
        self.output = output or sys.stdout
        # Every job/handle gets a unique id.
        self._next_job_id = 0
        # Output from each job is buffered.
        self.buffers = {}
        # Each job has a title, usually the command line being run.
        self.titles = {}
        self.outstanding_jobs = set()
        # Queries may run on several threads at once.
        self._lock = threading.Lock()

    def get_handle(self, title):
        with self._lock:
            job_id = self._next_job_id
            self._next_job_id += 1
            self.titles[job_id] = title
            self.buffers[job_id] = io.StringIO()
            self.outstanding_jobs.add(job_id)
        return _DisplayHandle(self, job_id)

    def print(self, *args, **kwargs):
        print(*args, file=self.output, **kwargs)

    # Callbacks that get overridden by subclasses.

    def _job_started(self, job_id):
        pass

    def _job_written(self, job_id, string):
        pass

    def _job_finished(self, job_id):
        pass

    # Callbacks for handles.

    def _handle_start(self, job_id):
        self._job_started(job_id)

    def _handle_write(self, job_id, string):
        self.buffers[job_id].write(string)
        self._job_written(job_id, string)

    def _handle_finish(self, job_id):
        with self._lock:
            self.outstanding_jobs.remove(job_id)
            self._job_finished(job_id)
            # Nobody reads a finished job's buffer again.
            del self.buffers[job_id]
            del self.titles[job_id]


class QuietDisplay(BaseDisplay):
    '''Prints nothing.'''
    pass


class VerboseDisplay(BaseDisplay):
    '''Waits until jobs are finished and then prints all of their output at
    once, to make sure jobs don't get interleaved. We use '===' as a delimiter
    to try to separate jobs from one another, and from other output.'''

    def _job_started(self, job_id):
        print('===', 'started', self.titles[job_id], '===', file=self.output)

    def _job_finished(self, job_id):
        print('===', 'finished', self.titles[job_id], '===', file=self.output)
        outputstr = self.buffers[job_id].getvalue()
        if outputstr:
            self.output.write(outputstr)
            if not outputstr.endswith('\n'):
                self.output.write('\n')
            print('===', file=self.output)


class _DisplayHandle:
    def __init__(self, display, job_id):
        self._display = display
        self._job_id = job_id
        self._opened = False
        self._closed = False

    def write(self, string):
        assert self._opened and not self._closed
        self._display._handle_write(self._job_id, string)

    # Context manager interface. We're extra careful to make sure that the
    # handle is only written to inside a with statment, and only used once.
    def __enter__(self):
        assert not self._opened and not self._closed
        self._opened = True
        self._display._handle_start(self._job_id)
        return self

    def __exit__(self, *args):
        assert self._opened and not self._closed
        self._display._handle_finish(self._job_id)
        self._job_id = None
        self._closed = True


def is_fancy_terminal(stream=None):
    '''The Windows terminal does not support the color codes we use for
    errors. Only color output when it's going to a real non-Windows tty.'''
    if stream is None:
        stream = sys.stdout
    return stream.isatty() and os.name != 'nt'
