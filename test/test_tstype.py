import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from tsdefgen.tstype import TypeScriptType, VoidType, needs_parenthesis, scan_top_level


class TestTypeScriptType(unittest.TestCase):

    def test_plain_type_is_not_a_union(self):
        ts_type = TypeScriptType.single('string', False, VoidType.NULL)
        self.assertFalse(ts_type.is_union)
        self.assertEqual(ts_type.format_with_parenthesis(), 'string')

    def test_nullable_type_adds_void_member(self):
        ts_type = TypeScriptType.single('string', True, VoidType.NULL)
        self.assertTrue(ts_type.is_union)
        self.assertEqual(ts_type.format_without_parenthesis(), 'string | null')
        self.assertEqual(ts_type.format_with_parenthesis(), '(string | null)')

    def test_undefined_void_type(self):
        ts_type = TypeScriptType.single('Widget', True, VoidType.UNDEFINED)
        self.assertEqual(str(ts_type), 'Widget | undefined')

    def test_any_absorbs_nullability(self):
        ts_type = TypeScriptType.single('any', True, VoidType.NULL)
        self.assertFalse(ts_type.is_union)
        self.assertEqual(ts_type.format_with_parenthesis(), 'any')

    def test_nullable_function_is_wrapped(self):
        ts_type = TypeScriptType.single('() => number', True, VoidType.NULL)
        self.assertEqual(ts_type.format_without_parenthesis(), '(() => number) | null')

    def test_function_type_needs_parenthesis_in_arrays(self):
        ts_type = TypeScriptType.single('(x: number) => string', False, VoidType.NULL)
        self.assertEqual(ts_type.format_with_parenthesis(), '((x: number) => string)')

    def test_nested_union_does_not_need_parenthesis(self):
        ts_type = TypeScriptType.single('Box<string | null>', False, VoidType.NULL)
        self.assertFalse(ts_type.is_union)
        self.assertEqual(ts_type.format_with_parenthesis(), 'Box<string | null>')

    def test_scan_top_level(self):
        self.assertEqual(scan_top_level('A | B'), (True, False))
        self.assertEqual(scan_top_level('(A | B)[]'), (False, False))
        self.assertEqual(scan_top_level('() => void'), (False, True))
        self.assertEqual(scan_top_level('Set<() => void>'), (False, False))
        self.assertEqual(scan_top_level('{ [key: string]: A | B }'), (False, False))

    def test_needs_parenthesis(self):
        self.assertTrue(needs_parenthesis('A | B'))
        self.assertTrue(needs_parenthesis('(a: A) => B | null'))
        self.assertFalse(needs_parenthesis('{ [key in Direction]: string }'))
        self.assertFalse(needs_parenthesis('string[]'))

    def test_void_type_names(self):
        self.assertEqual(VoidType.NULL.js_type_name, 'null')
        self.assertEqual(VoidType('undefined'), VoidType.UNDEFINED)


if __name__ == '__main__':
    unittest.main()
