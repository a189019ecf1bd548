#!/usr/bin/env python3
"""
Main test runner for the loxfront test suite.

Author: xwest
"""

import sys
import os
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.dirname(__file__))
sys.path.insert(0, project_root)


def run_all_tests():
    """Run all loxfront tests."""

    print("🚀 loxfront Test Suite")
    print("=" * 60)

    # Test if basic imports work
    try:
        from loxfront.lexer import Scanner
        from loxfront.parser import Parser, print_program

        print("✅ All front end modules imported successfully")
        print()

    except ImportError as e:
        print(f"❌ Failed to import front end modules: {e}")
        return False

    # Smoke test the scan -> parse -> print pipeline
    print("Testing simple pipeline...")
    code = """
    fun add(a, b) {
        return a + b;
    }

    print add(5, 10);
    """

    print("  🔧 Scanning...")
    tokens = list(Scanner(code))
    print(f"     Generated {len(tokens)} tokens")

    print("  🔧 Parsing...")
    parser = Parser(tokens)
    statements = list(parser)
    print(f"     Generated {len(statements)} top-level declarations")
    if parser.has_errors():
        print(f"     ❌ Syntax errors: {len(parser.errors)}")
        return False

    print("  🔧 Printing...")
    print_program(statements)
    print("     ✅ Pipeline completed")
    print()

    # Discover and run the unit tests
    loader = unittest.TestLoader()
    suite = loader.discover(os.path.join(project_root, "tests"), pattern="test_*.py")

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    print()
    print("=" * 60)
    if result.wasSuccessful():
        print(f"🎉 All {result.testsRun} tests passed!")
    else:
        print(f"❌ {len(result.failures)} failures, {len(result.errors)} errors "
              f"out of {result.testsRun} tests")

    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
