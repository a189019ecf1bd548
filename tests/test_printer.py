"""
Test suite for the Lox source printer.

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from loxfront.parser import AstPrinter, parse_string, print_program, dump
from loxfront.parser.printer import format_number


PROGRAM = '''
class Animal {
  init(name) { this.name = name; }
  speak() { print this.name + " makes a sound"; }
}

class Dog < Animal {
  speak() { super.speak(); print "woof"; }
}

fun fib(n) {
  if (n <= 1) return n;
  return fib(n - 2) + fib(n - 1);
}

var i;
for (var j = 0; j < 10; j = j + 1) { i = -j * (2 + 3) / 4.5; }
while (!false and nil == nil or true) print fib(10);
if (i != 0) { print i; } else if (i >= 0.25) print "x"; else { }
{
  var a = "multi
line";
  a.b.c = f(1, 2,)(3);
  return;
}
'''


class TestAstPrinter(unittest.TestCase):
    """Test printing parsed programs back to source."""

    def test_round_trip(self):
        """Printing and re-parsing yields the same tree, line numbers aside."""
        statements = parse_string(PROGRAM)
        printed = print_program(statements)

        self.assertEqual(dump(parse_string(printed)), dump(statements))

    def test_round_trip_of_huge_number(self):
        statements = parse_string("print " + "9" * 400 + ";")
        self.assertEqual(statements[0].expression.value, float("inf"))

        reparsed = parse_string(print_program(statements))

        self.assertEqual(reparsed, statements)

    def test_printing_is_stable(self):
        printed = print_program(parse_string(PROGRAM))
        self.assertEqual(print_program(parse_string(printed)), printed)

    def test_simple_statements(self):
        printed = print_program(parse_string("var a=1;print a+2;var b;"))
        self.assertEqual(printed, "var a = 1;\nprint a + 2;\nvar b;\n")

    def test_class_layout(self):
        printed = print_program(parse_string("class A < B { m(a, b,) { return; } }"))

        self.assertEqual(printed, (
            "class A < B {\n"
            "    m(a, b) {\n"
            "        return;\n"
            "    }\n"
            "}\n"
        ))

    def test_custom_indent(self):
        printed = print_program(parse_string("while (x) { print x; }"), indent="\t")
        self.assertEqual(printed, "while (x) {\n\tprint x;\n}\n")

    def test_non_block_body_is_indented(self):
        printed = print_program(parse_string("if (x) print 1; else print 2;"))
        self.assertEqual(printed, "if (x)\n    print 1;\nelse\n    print 2;\n")

    def test_only_groupings_get_parentheses(self):
        printer = AstPrinter()
        expr = parse_string("(1 + 2) * -(3);")[0].expression

        self.assertEqual(printer.print(expr), "(1 + 2) * -(3)")

    def test_literals(self):
        printer = AstPrinter()
        for source in ["nil", "true", "false", '"text"', "12", "0.5"]:
            with self.subTest(source=source):
                expr = parse_string(source + ";")[0].expression
                self.assertEqual(printer.print_expr(expr), source)

    def test_empty_program(self):
        self.assertEqual(print_program([]), "")


class TestFormatNumber(unittest.TestCase):
    """Test number formatting for printed literals."""

    def test_integral_values_have_no_fraction(self):
        self.assertEqual(format_number(123.0), "123")
        self.assertEqual(format_number(0.0), "0")

    def test_fractions(self):
        self.assertEqual(format_number(12.3), "12.3")
        self.assertEqual(format_number(0.1), "0.1")

    def test_no_exponent_notation(self):
        self.assertEqual(format_number(1e-07), "0.0000001")
        self.assertEqual(format_number(1e21), "1000000000000000000000")

    def test_infinity_prints_as_overflowing_literal(self):
        printed = format_number(float("inf"))
        self.assertTrue(printed.isdigit())
        self.assertEqual(float(printed), float("inf"))


if __name__ == '__main__':
    unittest.main()
