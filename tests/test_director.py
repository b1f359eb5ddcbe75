import unittest

from ell1 import Alternative, LL1Conflict, construct, director_sets, is_ll1, UnknownSymbol
from ell1.analysis.director import build_director_tables
from ell1.analysis.first_follow import compute_nullable_first_follow
from ell1.analysis.symbols import ProductionTable

SCENARIO_B = [('S', ['A', 'b']), ('A', ['a']), ('A', [])]
SCENARIO_C = SCENARIO_B + [('S', ['a'])]

def build(productions, terminals=('a', 'b'), non_terminals=('S', 'A')):
    return construct(terminals, non_terminals, productions, 'S')

class TestDirectorSets(unittest.TestCase):

    def test_scenario_b(self):
        g = build(SCENARIO_B)
        sets = director_sets(g, 'A')
        self.assertEqual(list(sets.values()), [{'a'}, {'b'}])
        self.assertEqual(sets[Alternative('A', 0, ('a',))], {'a'})
        self.assertEqual(sets[Alternative('A', 1, ())], {'b'})
        self.assertTrue(is_ll1(g))

    def test_scenario_c(self):
        g = build(SCENARIO_C)
        sets = g.calculate_director_set('S')
        self.assertEqual(sets[Alternative('S', 0, ('A', 'b'))], {'a', 'b'})
        self.assertEqual(sets[Alternative('S', 1, ('a',))], {'a'})
        self.assertFalse(g.is_ll1())

    def test_duplicate_alternatives_are_separate_entries(self):
        g = construct(['a'], ['S'], [('S', ['a']), ('S', ['a'])], 'S')
        sets = g.calculate_director_set('S')
        self.assertEqual(len(sets), 2)
        self.assertEqual([alt.index for alt in sets], [0, 1])
        self.assertFalse(g.is_ll1())

    def test_nullable_alternative_uses_follow(self):
        g = construct(
            ['x', 'y', 'z'], ['S', 'A', 'B'],
            [('S', ['A', 'z']), ('A', ['B', 'x']), ('A', ['B']), ('B', ['y']), ('B', [])],
            'S'
        )
        sets = list(g.calculate_director_set('A').values())
        self.assertEqual(sets[0], {'x', 'y'})
        self.assertEqual(sets[1], {'y', 'z'})
        self.assertFalse(g.is_ll1())

    def test_unknown_symbol(self):
        g = build(SCENARIO_B)
        with self.assertRaises(UnknownSymbol):
            g.calculate_director_set('Q')

    def test_returned_mapping_is_a_copy(self):
        g = build(SCENARIO_B)
        sets = g.calculate_director_set('A')
        sets.clear()
        self.assertEqual(len(g.calculate_director_set('A')), 2)

    def test_stored_tables_are_read_only(self):
        g = build(SCENARIO_B)
        ff = compute_nullable_first_follow(ProductionTable(g.catalog, g.productions))
        tables = build_director_tables(ProductionTable(g.catalog, g.productions), ff)
        with self.assertRaises(TypeError):
            tables.director['Z'] = {}
        with self.assertRaises(TypeError):
            tables.director['A'][Alternative('A', 0, ('a',))] = frozenset()
        self.assertEqual(tables.director['A'][Alternative('A', 1, ())], {'b'})

class TestLL1(unittest.TestCase):

    def test_scenario_a(self):
        g = construct(['a', 'b'], ['S'], [('S', ['a']), ('S', ['b'])], 'S')
        self.assertTrue(g.is_ll1())
        self.assertEqual(g.conflicts(), ())
        self.assertEqual(g.pretty_conflicts(), '(no conflicts)')

    def test_conflict_report(self):
        g = build(SCENARIO_C)
        (conflict,) = g.conflicts()
        self.assertIsInstance(conflict, LL1Conflict)
        self.assertEqual(conflict.lhs, 'S')
        self.assertEqual(conflict.first.index, 0)
        self.assertEqual(conflict.second.index, 1)
        self.assertEqual(conflict.overlap, {'a'})
        self.assertEqual(str(conflict), 'S: [S#0 -> A b] / [S#1 -> a] on {a}')

    def test_left_recursion_is_not_ll1(self):
        g = construct(['+', 'id'], ['E', 'T'],
                      [('E', ['E', '+', 'T']), ('E', ['T']), ('T', ['id'])], 'E')
        self.assertFalse(g.is_ll1())

    def test_verdict_independent_of_order(self):
        for prods in (SCENARIO_B, SCENARIO_C):
            forward = build(prods)
            backward = build(list(reversed(prods)))
            self.assertEqual(forward.is_ll1(), backward.is_ll1())
        a = construct(['a', 'b'], ['S'], [('S', ['a']), ('S', ['b'])], 'S')
        b = construct(['a', 'b'], ['S'], [('S', ['b']), ('S', ['a'])], 'S')
        self.assertEqual(a.is_ll1(), b.is_ll1())

    def test_ell1_alias(self):
        g = build(SCENARIO_B)
        self.assertEqual(g.is_ell1(), g.is_ll1())

    def test_idempotent(self):
        g = build(SCENARIO_C)
        self.assertEqual(g.is_ll1(), g.is_ll1())
        self.assertEqual(g.calculate_director_set('S'), g.calculate_director_set('S'))

if __name__ == '__main__':
    unittest.main()
