import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from adaparse.analyzer import (
    NO_ERRORS, main_compiler_pipeline_cli, perform_semantic_analysis_from_source,
    )


GOOD = '''\
procedure P (in x : integer; out y : integer) is
  a : integer;
begin
  a := x + y;
end P;
'''

DUPLICATE = '''\
procedure P is
  x : integer;
  x : integer;
begin
end P;
'''


class TestPipeline(unittest.TestCase):

    def test_success(self):
        table_text, error_text, listing = perform_semantic_analysis_from_source(GOOD)
        self.assertEqual(error_text, NO_ERRORS)
        self.assertTrue(table_text.startswith('Name'))
        self.assertIn('function', table_text)
        self.assertIn('--- Analysis completed without errors ---', listing)

    def test_failure(self):
        table_text, error_text, listing = perform_semantic_analysis_from_source(DUPLICATE)
        self.assertEqual(error_text, "Error: Duplicate symbol: 'x' at line number 3")
        self.assertEqual(listing[-1], "Analysis stopped: " + error_text)

    def test_lexical_failure(self):
        _, error_text, _ = perform_semantic_analysis_from_source('procedure $')
        self.assertIn('unknown character', error_text)


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def write(self, name, text):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, 'w') as f:
            f.write(text)
        return path

    def cli(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            status = main_compiler_pipeline_cli(list(argv))
        return status, out.getvalue()

    def test_success_prints_symbol_table(self):
        status, output = self.cli(self.write('good.ada', GOOD))
        self.assertEqual(status, 0)
        lines = output.splitlines()
        self.assertTrue(lines[0].startswith('Name'))
        self.assertTrue(lines[2].startswith('P '))

    def test_failure_prints_one_diagnostic(self):
        status, output = self.cli(self.write('dup.ada', DUPLICATE))
        self.assertEqual(status, 1)
        self.assertEqual(output.splitlines(), ["Error: Duplicate symbol: 'x' at line number 3"])

    def test_tokens(self):
        status, output = self.cli('--tokens', self.write('good.ada', GOOD))
        self.assertEqual(status, 0)
        lines = output.splitlines()
        self.assertEqual(lines[0], '(PROCEDURE, procedure)')
        self.assertEqual(lines[-1], '(eof, EOF)')

    def test_listing_file(self):
        listing_path = os.path.join(self.tmpdir.name, 'listing.txt')
        status, _ = self.cli('--listing', listing_path, self.write('good.ada', GOOD))
        self.assertEqual(status, 0)
        with open(listing_path) as f:
            listing = f.read()
        self.assertIn("Entering procedure 'P' scope (depth 1)", listing)

    def test_listing_written_on_failure(self):
        listing_path = os.path.join(self.tmpdir.name, 'listing.txt')
        status, _ = self.cli('-l', listing_path, self.write('dup.ada', DUPLICATE))
        self.assertEqual(status, 1)
        with open(listing_path) as f:
            self.assertIn('Analysis stopped:', f.read())


if __name__ == '__main__':
    unittest.main()
