"""
Tests for AST node construction, immutability and structural equality.

Author: xwest
"""

import unittest

from prattcalc.parser.ast_nodes import (
    ASTNodeType, ASTVisitor, Atom, PrefixOp, PostfixOp, BinaryOp, TernaryOp,
    iter_nodes, depth, fold,
)
from prattcalc.lexer.tokens import SourceLocation


class TestConstruction(unittest.TestCase):

    def test_atom_is_leaf(self):
        node = Atom("42")
        self.assertEqual(node.label, "42")
        self.assertEqual(node.children(), ())
        self.assertTrue(node.is_leaf)
        self.assertEqual(node.arity, 0)
        self.assertEqual(node.node_type, ASTNodeType.ATOM)
        self.assertTrue(node.is_number)
        self.assertFalse(Atom("x").is_number)

    def test_arities(self):
        one, two, three = Atom("1"), Atom("2"), Atom("3")
        self.assertEqual(PrefixOp("-", one).arity, 1)
        self.assertEqual(PostfixOp("!", one).arity, 1)
        self.assertEqual(BinaryOp("+", one, two).arity, 2)
        self.assertEqual(TernaryOp("?", one, two, three).arity, 3)

    def test_children_are_ordered(self):
        left, right = Atom("1"), Atom("2")
        node = BinaryOp("-", left, right)
        self.assertEqual(node.children(), (left, right))
        self.assertIs(node.left, left)
        self.assertIs(node.right, right)

    def test_ternary_accessors(self):
        node = TernaryOp("?", Atom("c"), Atom("t"), Atom("e"))
        self.assertEqual(node.condition.label, "c")
        self.assertEqual(node.then_branch.label, "t")
        self.assertEqual(node.else_branch.label, "e")

    def test_children_must_be_nodes(self):
        with self.assertRaises(TypeError):
            BinaryOp("+", Atom("1"), "2")
        with self.assertRaises(TypeError):
            PrefixOp("-", None)

    def test_label_must_be_non_empty(self):
        with self.assertRaises(ValueError):
            Atom("")

    def test_location_is_kept(self):
        location = SourceLocation("<input>", 1, 3, 2)
        self.assertEqual(Atom("x", location).location, location)


class TestImmutability(unittest.TestCase):

    def test_cannot_assign(self):
        node = BinaryOp("+", Atom("1"), Atom("2"))
        with self.assertRaises(AttributeError):
            node.label = "-"
        with self.assertRaises(AttributeError):
            node.extra = 1

    def test_cannot_delete(self):
        node = Atom("1")
        with self.assertRaises(AttributeError):
            del node.label

    def test_children_tuple(self):
        node = BinaryOp("+", Atom("1"), Atom("2"))
        self.assertIsInstance(node.children(), tuple)


class TestEquality(unittest.TestCase):

    def test_structural_equality(self):
        a = BinaryOp("+", Atom("1"), PrefixOp("-", Atom("2")))
        b = BinaryOp("+", Atom("1"), PrefixOp("-", Atom("2")))
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))

    def test_locations_are_ignored(self):
        a = Atom("1", SourceLocation("a", 1, 1, 0))
        b = Atom("1", SourceLocation("b", 9, 9, 9))
        self.assertEqual(a, b)

    def test_label_difference(self):
        self.assertNotEqual(BinaryOp("+", Atom("1"), Atom("2")),
                            BinaryOp("-", Atom("1"), Atom("2")))

    def test_shape_difference(self):
        left = BinaryOp("-", BinaryOp("-", Atom("a"), Atom("b")), Atom("c"))
        right = BinaryOp("-", Atom("a"), BinaryOp("-", Atom("b"), Atom("c")))
        self.assertNotEqual(left, right)

    def test_prefix_and_postfix_differ(self):
        self.assertNotEqual(PrefixOp("-", Atom("1")), PostfixOp("-", Atom("1")))

    def test_not_equal_to_other_types(self):
        self.assertNotEqual(Atom("1"), "1")


class TestTraversal(unittest.TestCase):

    def setUp(self):
        # (+ 1 (* 2 3))
        self.tree = BinaryOp("+", Atom("1"), BinaryOp("*", Atom("2"), Atom("3")))

    def test_iter_nodes_is_preorder(self):
        self.assertEqual([n.label for n in iter_nodes(self.tree)], ["+", "1", "*", "2", "3"])

    def test_depth(self):
        self.assertEqual(depth(Atom("1")), 1)
        self.assertEqual(depth(self.tree), 3)

    def test_visitor_dispatch(self):
        class Counter(ASTVisitor):
            def visit_atom(self, node, results):
                return 1

            def generic_visit(self, node, results):
                return sum(results)

        self.assertEqual(self.tree.accept(Counter()), 3)

    def test_visitor_sees_children_in_order(self):
        class Labels(ASTVisitor):
            def generic_visit(self, node, results):
                return [node.label] + [label for child in results for label in child]

        self.assertEqual(self.tree.accept(Labels()), ["+", "1", "*", "2", "3"])

    def test_fold(self):
        self.assertEqual(fold(self.tree, lambda node, sizes: 1 + sum(sizes)), 5)

    def test_str_and_repr(self):
        self.assertEqual(str(self.tree), "(+ 1 (* 2 3))")
        self.assertEqual(repr(Atom("1")), "Atom('1')")
        self.assertEqual(repr(PrefixOp("-", Atom("1"))), "PrefixOp('-', Atom('1'))")


class TestDeepTrees(unittest.TestCase):
    """Trees much deeper than the interpreter's recursion limit."""

    LEVELS = 3000

    def chain(self, label="-"):
        node = Atom("1")
        for _ in range(self.LEVELS):
            node = PrefixOp(label, node)
        return node

    def test_depth(self):
        self.assertEqual(depth(self.chain()), self.LEVELS + 1)

    def test_equality_and_hash(self):
        a, b = self.chain(), self.chain()
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, self.chain("+"))

    def test_linear_forms(self):
        tree = self.chain()
        self.assertEqual(tree.to_rpn(), "1" + " -" * self.LEVELS)
        self.assertTrue(str(tree).startswith("(- (- "))
        self.assertTrue(repr(tree).endswith("Atom('1')" + ")" * self.LEVELS))


if __name__ == "__main__":
    unittest.main()
