import unittest

from ell1 import construct, ExtendedNotationError, GrammarError, UnknownSymbol
from ell1.grammar.ast import Group, Name, Suffix
from ell1.grammar.parser import has_extended_notation, parse_extended_rhs

ALT, LP, RP, LB, RB, LO, RO = '\\|', '\\(', '\\)', '\\{', '\\}', '\\[', '\\]'

class TestParseExtendedRhs(unittest.TestCase):

    def test_plain_rhs(self):
        expr = parse_extended_rhs(['a', 'B'])
        self.assertEqual(len(expr.alts), 1)
        self.assertEqual([atom.node.ident for atom in expr.alts[0].items], ['a', 'B'])

    def test_empty_alternative(self):
        expr = parse_extended_rhs(['a', ALT])
        self.assertEqual(len(expr.alts), 2)
        self.assertEqual(expr.alts[1].items, [])

    def test_repetition_becomes_star_group(self):
        expr = parse_extended_rhs([LB, 'a', RB])
        (atom,) = expr.alts[0].items
        self.assertIsInstance(atom.node, Group)
        self.assertEqual(atom.suffix, Suffix.STAR)
        self.assertIsInstance(atom.node.expr.alts[0].items[0].node, Name)

    def test_unbalanced(self):
        for rhs in ([LP, 'a'], ['a', RP], [LP, 'a', RB], [LB, LO, 'a', RB, RO]):
            with self.assertRaises(ExtendedNotationError):
                parse_extended_rhs(rhs, 'S')

    def test_has_extended_notation(self):
        self.assertTrue(has_extended_notation(['a', ALT, 'b']))
        self.assertFalse(has_extended_notation(['a', '|', '(']))

class TestLowering(unittest.TestCase):

    def test_top_level_alternation_splits(self):
        g = construct(['a', 'b'], ['S'], [('S', ['a', ALT, 'b'])], 'S')
        self.assertEqual(g.productions_for('S'), (('a',), ('b',)))
        self.assertEqual(g.non_terminals, ('S',))
        self.assertTrue(g.is_ll1())

    def test_repetition(self):
        g = construct(['a', 'b'], ['S'], [('S', [LB, 'a', RB, 'b'])], 'S')
        self.assertEqual(g.productions_for('S'), (('__rep1', 'b'),))
        self.assertEqual(g.productions_for('__rep1'), ((), ('a', '__rep1')))
        self.assertIn('__rep1', g.non_terminals)
        self.assertEqual(g.calculate_first_set(['S']), {'a', 'b'})
        self.assertEqual(g.calculate_follow_set('__rep1'), {'b'})
        self.assertTrue(g.is_ll1())

    def test_optional_conflict_is_detected(self):
        g = construct(['a'], ['S'], [('S', [LO, 'a', RO, 'a'])], 'S')
        self.assertEqual(g.productions_for('S'), (('__opt1', 'a'),))
        self.assertEqual(g.productions_for('__opt1'), ((), ('a',)))
        self.assertFalse(g.is_ell1())
        (conflict,) = g.conflicts()
        self.assertEqual(conflict.lhs, '__opt1')

    def test_group_with_alternatives(self):
        g = construct(['a', 'b', 'c'], ['S'], [('S', [LP, 'a', ALT, 'b', RP, 'c'])], 'S')
        self.assertEqual(g.productions_for('S'), (('__grp1', 'c'),))
        self.assertEqual(g.productions_for('__grp1'), (('a',), ('b',)))

    def test_single_branch_group_is_inlined(self):
        g = construct(['a', 'b'], ['S'], [('S', [LP, 'a', 'b', RP])], 'S')
        self.assertEqual(g.productions_for('S'), (('a', 'b'),))
        self.assertEqual(g.non_terminals, ('S',))

    def test_alternation_with_repetition(self):
        g = construct(['a', 'x'], ['S'], [('S', ['x', ALT, LB, 'a', RB])], 'S')
        self.assertEqual(g.productions_for('S'), (('x',), ('__rep1',)))

    def test_fresh_names_avoid_declared_names(self):
        g = construct(
            ['a', 'b'], ['S', '__rep1'],
            [('S', [LB, 'a', RB, '__rep1']), ('__rep1', ['b'])],
            'S'
        )
        self.assertEqual(g.productions_for('S'), (('__rep2', '__rep1'),))
        self.assertEqual(g.productions_for('__rep1'), (('b',),))
        self.assertEqual(g.productions_for('__rep2'), ((), ('a', '__rep2')))

    def test_plain_productions_keep_order(self):
        g = construct(
            ['a', 'b'], ['S', 'A'],
            [('S', ['A']), ('A', [LB, 'a', RB]), ('S', ['b'])],
            'S'
        )
        self.assertEqual(
            [str(p) for p in g.productions],
            ['S -> A', 'A -> __rep1', '__rep1 -> ε', '__rep1 -> a __rep1', 'S -> b']
        )

    def test_undeclared_symbol_inside_notation(self):
        with self.assertRaises(GrammarError):
            construct(['a'], ['S'], [('S', [LB, 'c', RB])], 'S')

    def test_unbalanced_reports_lhs(self):
        with self.assertRaises(ExtendedNotationError) as cm:
            construct(['a'], ['S'], [('S', [LB, 'a'])], 'S')
        self.assertEqual(cm.exception.lhs, 'S')

class TestExtendedQueries(unittest.TestCase):

    def setUp(self):
        self.g = construct(['a', 'b'], ['S'], [('S', [LB, 'a', RB, 'b'])], 'S')

    def test_repetition_is_nullable(self):
        self.assertTrue(self.g.is_nullable([LB, 'a', RB]))
        self.assertTrue(self.g.is_nullable([LO, 'b', RO]))
        self.assertFalse(self.g.is_nullable([LB, 'a', RB, 'b']))

    def test_first_looks_past_repetition(self):
        self.assertEqual(self.g.calculate_first_set([LB, 'a', RB, 'b']), {'a', 'b'})
        self.assertEqual(self.g.calculate_first_set([LB, 'a', RB]), {'a'})

    def test_group_with_empty_branch(self):
        first, nullable = self.g.first_of_sequence([LP, 'a', ALT, RP, 'b'])
        self.assertEqual(first, {'a', 'b'})
        self.assertFalse(nullable)
        self.assertTrue(self.g.is_nullable(['a', ALT]))

    def test_query_adds_no_nonterminals(self):
        self.g.calculate_first_set([LP, 'a', ALT, 'b', RP])
        self.assertEqual(self.g.non_terminals, ('S', '__rep1'))

    def test_unbalanced_query(self):
        with self.assertRaises(ExtendedNotationError):
            self.g.is_nullable([LB, 'a'])

    def test_undeclared_symbol_in_query(self):
        with self.assertRaises(UnknownSymbol):
            self.g.calculate_first_set([LB, 'c', RB])

if __name__ == '__main__':
    unittest.main()
