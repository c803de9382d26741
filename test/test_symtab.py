import unittest

from adaparse.symtab import (
    BASE_DEPTH, ParamMode, Symbol, SymbolKind, SymbolKindError, SymbolTable, VarType,
    )


class TestSymbol(unittest.TestCase):

    def test_new_symbol_is_kind_unset(self):
        symbol = Symbol('x', 1)
        self.assertIsNone(symbol.kind)
        self.assertRaises(SymbolKindError, lambda: symbol.variable)

    def test_set_kind_installs_one_attribute_block(self):
        symbol = Symbol('x', 1).set_kind(SymbolKind.VARIABLE)
        symbol.variable.type_of_variable = VarType.FLOAT
        symbol.variable.size = VarType.FLOAT.size
        symbol.offset = 6
        self.assertEqual(symbol.size, 4)
        self.assertEqual(symbol.variable.offset, 6)
        self.assertIs(symbol.value_type, VarType.FLOAT)
        self.assertRaises(SymbolKindError, lambda: symbol.constant)
        self.assertRaises(SymbolKindError, lambda: symbol.function)

    def test_kind_cannot_change(self):
        symbol = Symbol('x', 1).set_kind(SymbolKind.CONSTANT)
        self.assertRaises(SymbolKindError, symbol.set_kind, SymbolKind.VARIABLE)

    def test_kind_error_is_a_type_error(self):
        symbol = Symbol('P', 0).set_kind(SymbolKind.FUNCTION)
        self.assertRaises(TypeError, lambda: symbol.offset)
        self.assertFalse(symbol.is_parameter)

    def test_parameter_flag(self):
        symbol = Symbol('c', 2).set_kind(SymbolKind.CONSTANT)
        symbol.is_parameter = True
        self.assertTrue(symbol.constant.is_parameter)
        self.assertTrue(symbol.is_parameter)

    def test_type_sizes(self):
        self.assertEqual(
            [VarType.INTEGER.size, VarType.FLOAT.size, VarType.CHARACTER.size],
            [2, 4, 1],
            )

    def test_function_description(self):
        symbol = Symbol('P', 0).set_kind(SymbolKind.FUNCTION)
        symbol.function.parameter_types.extend([VarType.INTEGER, VarType.CHARACTER])
        symbol.function.parameter_modes.extend([ParamMode.IN, ParamMode.OUT])
        self.assertIn('Params(in integer, out character)', str(symbol))


class TestSymbolTable(unittest.TestCase):

    def setUp(self):
        self.table = SymbolTable()

    def test_starts_at_base_depth(self):
        self.assertEqual(self.table.current_depth, BASE_DEPTH)
        self.assertEqual(len(self.table), 0)

    def test_insert_and_lookup(self):
        symbol = self.table.insert('x', 0)
        self.assertIs(self.table.lookup('x'), symbol)
        self.assertIsNone(self.table.lookup('y'))
        self.assertIn('x', self.table)

    def test_lookup_is_case_sensitive(self):
        self.table.insert('Count', 0)
        self.assertIsNone(self.table.lookup('count'))

    def test_innermost_declaration_wins(self):
        outer = self.table.insert('x', 0)
        inner = self.table.insert('x', 1)
        self.assertIs(self.table.lookup('x'), inner)
        self.table.delete_depth(1)
        self.assertIs(self.table.lookup('x'), outer)

    def test_lookup_filtered_by_kind(self):
        function = self.table.insert('P', 0).set_kind(SymbolKind.FUNCTION)
        variable = self.table.insert('P', 1).set_kind(SymbolKind.VARIABLE)
        self.assertIs(self.table.lookup('P'), variable)
        self.assertIs(self.table.lookup('P', SymbolKind.FUNCTION), function)
        self.assertIsNone(self.table.lookup('P', SymbolKind.CONSTANT))

    def test_lookup_at_depth(self):
        self.table.insert('x', 0)
        self.assertIsNotNone(self.table.lookup_at_depth('x', 0))
        self.assertIsNone(self.table.lookup_at_depth('x', 1))

    def test_delete_depth_leaves_other_depths_alone(self):
        self.table.insert('P', 0)
        self.table.insert('a', 1)
        self.table.insert('b', 1)
        self.table.insert('c', 2)
        self.table.delete_depth(1)
        self.assertNotIn('a', self.table)
        self.assertNotIn('b', self.table)
        self.assertIn('P', self.table)
        self.assertIn('c', self.table)
        self.assertEqual(len(self.table), 2)

    def test_delete_unused_depth(self):
        self.table.insert('x', 0)
        self.table.delete_depth(5)
        self.assertEqual(len(self.table), 1)

    def test_entries_in_declaration_order(self):
        for name in ('P', 'b', 'a'):
            self.table.insert(name, 0)
        self.table.insert('z', 1)
        self.assertEqual([s.name for s in self.table.entries(0)], ['P', 'b', 'a'])
        self.assertEqual([s.name for s in self.table.entries()], ['P', 'b', 'a', 'z'])
        self.assertEqual(self.table.entries(3), [])


if __name__ == '__main__':
    unittest.main()
