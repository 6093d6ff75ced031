import io
import os
from pathlib import Path

from svninfo import display

import shared


class SharedTestCodeTest(shared.SvnInfoTest):
    def test_create_dir(self):
        empty_dir = shared.create_dir()
        self.assertListEqual([], os.listdir(empty_dir))
        content = {Path('foo'): 'a', Path('bar/baz'): 'b'}
        content_dir = shared.create_dir(content)
        actual_content = {}
        for p in Path(content_dir).glob('**/*'):
            if p.is_dir():
                continue
            with p.open() as f:
                actual_content[p.relative_to(content_dir)] = f.read()
        self.assertDictEqual(content, actual_content)

    def test_fake_runner(self):
        runner = shared.FakeRunner('Revision: 1\n', returncode=3,
                                   errors='oops')
        disp = display.QuietDisplay(io.StringIO())
        result = runner.run(['svn', 'info', '.'], disp.get_handle('job'))
        self.assertEqual((3, 'Revision: 1\n', 'oops'), tuple(result))
        self.assertListEqual([['svn', 'info', '.']], runner.commands)
        self.assertSetEqual(set(), disp.outstanding_jobs)

    def test_generator_tests_are_rejected(self):
        class GeneratorTest(shared.SvnInfoTest):
            def test_generator(self):
                yield

        with self.assertRaises(TypeError):
            GeneratorTest('test_generator')
