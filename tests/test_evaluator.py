"""Unit tests for calcsaas.services.evaluator: sanitize, parse, evaluate and format."""

import unittest

from calcsaas.core.errors import InvalidExpression
from calcsaas.services.evaluator import (
    MAX_NESTING_DEPTH,
    evaluate,
    format_number,
    sanitize,
    tokenize,
)


class TestSanitize(unittest.TestCase):
    """Disallowed characters are dropped, not rejected."""

    def test_keeps_allowed_characters(self) -> None:
        self.assertEqual(sanitize("(1 + 2.5) * 3 / 4 - 5"), "(1 + 2.5) * 3 / 4 - 5")

    def test_strips_letters(self) -> None:
        self.assertEqual(sanitize("2+abc*3"), "2+*3")

    def test_strips_everything_else(self) -> None:
        self.assertEqual(sanitize("1,000 ^ $x;"), "1000  ")
        self.assertEqual(sanitize("__import__('os')"), "()")


class TestEvaluateBasics(unittest.TestCase):
    """Operator precedence, parentheses and unary signs."""

    def test_addition(self) -> None:
        self.assertEqual(evaluate("2+2"), 4)

    def test_same_input_same_result(self) -> None:
        results = {evaluate("2+2") for _ in range(5)}
        self.assertEqual(results, {4.0})

    def test_parentheses(self) -> None:
        self.assertEqual(evaluate("(2+3)*4"), 20)

    def test_multiplication_binds_tighter(self) -> None:
        self.assertEqual(evaluate("2+3*4"), 14)
        self.assertEqual(evaluate("20-10/5"), 18)

    def test_left_associative(self) -> None:
        self.assertEqual(evaluate("10-4-3"), 3)
        self.assertEqual(evaluate("64/4/2"), 8)

    def test_division_is_floating_point(self) -> None:
        self.assertEqual(evaluate("10/4"), 2.5)
        self.assertAlmostEqual(evaluate("1/3"), 1 / 3)

    def test_unary_minus(self) -> None:
        self.assertEqual(evaluate("-3+5"), 2)
        self.assertEqual(evaluate("-(2+3)"), -5)
        self.assertEqual(evaluate("2*-3"), -6)
        self.assertEqual(evaluate("- -2"), 2)
        self.assertEqual(evaluate("2- -3"), 5)
        self.assertEqual(evaluate("2+-3"), -1)
        self.assertEqual(evaluate("2-+3"), -1)

    def test_unary_plus(self) -> None:
        self.assertEqual(evaluate("+5"), 5)

    def test_decimal_literals(self) -> None:
        self.assertEqual(evaluate("1.5+.5"), 2)
        self.assertEqual(evaluate("5.*2"), 10)
        self.assertEqual(evaluate("0.5*2"), 1)

    def test_spaces_are_ignored_between_tokens(self) -> None:
        self.assertEqual(evaluate("  ( 1 + 2 ) * 3  "), 9)

    def test_floating_point_result(self) -> None:
        self.assertEqual(evaluate("0.1+0.2"), 0.1 + 0.2)

    def test_negative_zero_normalized(self) -> None:
        result = evaluate("-0")
        self.assertEqual(result, 0)
        self.assertEqual(format_number(result), "0")

    def test_filter_then_evaluate(self) -> None:
        """Stripped characters can join digits: '1,000+1' evaluates as '1000+1'."""
        self.assertEqual(evaluate("1,000+1"), 1001)
        self.assertEqual(evaluate("3 apples + 4 pears"), 7)


class TestEvaluateRejects(unittest.TestCase):
    """Inputs that must fail with InvalidExpression."""

    def assertInvalid(self, expression: str) -> None:
        with self.assertRaises(InvalidExpression) as ctx:
            evaluate(expression)
        self.assertEqual(ctx.exception.message, "Invalid mathematical expression")

    def test_empty(self) -> None:
        self.assertInvalid("")

    def test_sanitizes_to_empty(self) -> None:
        self.assertInvalid("abc")

    def test_only_spaces(self) -> None:
        self.assertInvalid("   ")

    def test_letters_leave_dangling_operator(self) -> None:
        self.assertInvalid("2+abc*3")

    def test_division_by_zero(self) -> None:
        self.assertInvalid("10/0")
        self.assertInvalid("1/(2-2)")
        self.assertInvalid("0/0")

    def test_overflowing_literal(self) -> None:
        self.assertInvalid("9" * 400)

    def test_overflowing_product(self) -> None:
        big = "9" * 300
        self.assertInvalid(f"{big}*{big}")

    def test_implicit_multiplication(self) -> None:
        self.assertInvalid("2(3)")
        self.assertInvalid("(1)(2)")

    def test_adjacent_numbers(self) -> None:
        self.assertInvalid("2 3")

    def test_unbalanced_parentheses(self) -> None:
        self.assertInvalid("(2+3")
        self.assertInvalid("2+3)")
        self.assertInvalid("()")

    def test_dangling_operators(self) -> None:
        self.assertInvalid("2+")
        self.assertInvalid("*2")
        self.assertInvalid("2**3")

    def test_adjacent_increment_decrement_signs(self) -> None:
        self.assertInvalid("--2")
        self.assertInvalid("2--3")
        self.assertInvalid("5++3")
        self.assertInvalid("- --2")

    def test_malformed_numbers(self) -> None:
        self.assertInvalid("1.2.3")
        self.assertInvalid("1..2")
        self.assertInvalid(".")

    def test_leading_zero_literal(self) -> None:
        self.assertInvalid("01+1")
        self.assertInvalid("007")

    def test_nesting_limit(self) -> None:
        depth = MAX_NESTING_DEPTH + 1
        self.assertInvalid("(" * depth + "1" + ")" * depth)

    def test_nesting_within_limit(self) -> None:
        depth = 50
        self.assertEqual(evaluate("(" * depth + "1" + ")" * depth), 1)


class TestTokenize(unittest.TestCase):
    def test_token_kinds(self) -> None:
        tokens = tokenize("(1.5 + 2)")
        self.assertEqual(
            [(t.kind, t.text) for t in tokens],
            [("lparen", "("), ("num", "1.5"), ("op", "+"), ("num", "2"), ("rparen", ")")],
        )

    def test_positions(self) -> None:
        tokens = tokenize("12 * 3")
        self.assertEqual([t.pos for t in tokens], [0, 3, 5])


class TestFormatNumber(unittest.TestCase):
    """Canonical decimal rendering of results."""

    def test_integers_have_no_fraction(self) -> None:
        self.assertEqual(format_number(4.0), "4")
        self.assertEqual(format_number(-6.0), "-6")
        self.assertEqual(format_number(100.0), "100")

    def test_zero(self) -> None:
        self.assertEqual(format_number(0.0), "0")
        self.assertEqual(format_number(-0.0), "0")

    def test_fractions(self) -> None:
        self.assertEqual(format_number(2.5), "2.5")
        self.assertEqual(format_number(0.1 + 0.2), "0.30000000000000004")
        self.assertEqual(format_number(1 / 3), "0.3333333333333333")

    def test_large_values_stay_fixed_below_1e21(self) -> None:
        self.assertEqual(format_number(1e20), "100000000000000000000")
        self.assertEqual(format_number(1.2345678901234568e20), "123456789012345680000")

    def test_exponent_from_1e21(self) -> None:
        self.assertEqual(format_number(1e21), "1e+21")
        self.assertEqual(format_number(-1.5e300), "-1.5e+300")

    def test_small_values(self) -> None:
        self.assertEqual(format_number(0.000001), "0.000001")
        self.assertEqual(format_number(1e-7), "1e-7")
        self.assertEqual(format_number(1.5e-7), "1.5e-7")

    def test_non_finite_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            format_number(float("inf"))
        with self.assertRaises(ValueError):
            format_number(float("nan"))


if __name__ == "__main__":
    unittest.main()
