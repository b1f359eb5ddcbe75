import contextlib
import io
import pathlib
import tempfile
import unittest

from ell1.ell1c import main

GRAMMARS = pathlib.Path(__file__).parent / 'grammars'

def run(*argv):
    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        code = main(list(argv))
    return code, out.getvalue(), err.getvalue()

class TestCheck(unittest.TestCase):

    def test_ll1_grammar(self):
        code, out, err = run('check', str(GRAMMARS / 'expr.g'))
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith('[CHECK OK] ll1=yes'))
        self.assertIn('conflicts=0', out)
        self.assertEqual(err, '')

    def test_not_ll1_grammar(self):
        code, out, err = run('check', str(GRAMMARS / 'left_recursive.g'))
        self.assertEqual(code, 1)
        self.assertIn('ll1=no', out)
        self.assertIn('[Conflicts Detail]', out)
        self.assertIn('E: [E#0 -> E + T] / [E#1 -> T] on {id}', out)

    def test_debug_goes_to_stderr(self):
        code, out, err = run('check', '-D', str(GRAMMARS / 'expr.g'))
        self.assertEqual(code, 0)
        self.assertIn('[DEBUG] BNF ready', err)
        self.assertIn('[BNF]', err)
        self.assertNotIn('[DEBUG]', out)

    def test_syntax_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = pathlib.Path(tmp) / 'bad.g'
            path.write_text('A : "a"\n', encoding='utf-8')
            code, out, err = run('check', str(path))
        self.assertEqual(code, 2)
        self.assertIn('[SYNTAX ERROR]', err)

    def test_grammar_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = pathlib.Path(tmp) / 'ambiguous.g'
            path.write_text('%token A ;\nA : "a" ;\n', encoding='utf-8')
            code, out, err = run('check', str(path))
        self.assertEqual(code, 2)
        self.assertIn('AmbiguousSymbolKind', err)

    def test_missing_file(self):
        code, out, err = run('check', str(GRAMMARS / 'does-not-exist.g'))
        self.assertEqual(code, 2)
        self.assertIn('FileNotFoundError', err)

class TestSets(unittest.TestCase):

    def test_single_nonterminal(self):
        code, out, err = run('sets', str(GRAMMARS / 'expr.g'), '-s', 'TermTail')
        self.assertEqual(code, 0)
        self.assertIn('[NULLABLE]\nTermTail', out)
        self.assertIn('TermTail : {*}', out)
        self.assertIn('TermTail#1 -> ε : {$, ), +, ,, -}', out)

    def test_all_nonterminals(self):
        code, out, err = run('sets', str(GRAMMARS / 'left_recursive.g'))
        self.assertEqual(code, 0)
        self.assertIn('E : {id}', out)
        self.assertIn('E : {$, +}', out)

    def test_unknown_nonterminal(self):
        code, out, err = run('sets', str(GRAMMARS / 'expr.g'), '-s', 'Nope')
        self.assertEqual(code, 2)
        self.assertIn('UnknownSymbol', err)

class TestFirst(unittest.TestCase):

    def test_sequence(self):
        code, out, err = run('first', str(GRAMMARS / 'expr.g'), 'TermTail', 'ExprTail')
        self.assertEqual(code, 0)
        self.assertIn('FIRST(TermTail ExprTail) = {*, +, -}', out)
        self.assertIn('nullable = yes', out)

    def test_empty_sequence(self):
        code, out, err = run('first', str(GRAMMARS / 'expr.g'))
        self.assertEqual(code, 0)
        self.assertIn('FIRST(ε) = {}', out)

if __name__ == '__main__':
    unittest.main()
