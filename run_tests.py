#!/usr/bin/env python
"""
Test runner script for the blog platform.
Runs the app test suites and the project-level security tests.
"""
import os
import sys

import django
from django.conf import settings
from django.test.utils import get_runner

APP_TEST_MODULES = [
    "apps.accounts",
    "apps.blog",
    "apps.common",
    "apps.notifications",
    "apps.superadmin",
    "apps.integrations",
]
SECURITY_TEST_MODULES = ["tests.test_api_security"]


def setup_django():
    """Setup Django for testing"""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.test_settings")
    django.setup()


def run_modules(title, modules):
    setup_django()

    TestRunner = get_runner(settings)
    test_runner = TestRunner()

    print(f"Running {title}...")
    print("=" * 50)

    failures = test_runner.run_tests(modules)

    print("\n" + "=" * 50)
    if failures:
        print(f"{title} completed with {failures} failures.")
        return 1
    print(f"All {title.lower()} passed!")
    return 0


def run_all_tests():
    return run_modules("Tests", APP_TEST_MODULES + SECURITY_TEST_MODULES)


def run_with_coverage():
    """Run tests with coverage reporting"""
    try:
        import coverage
    except ImportError:
        print("Coverage.py not installed. Install with: pip install coverage")
        return 1

    cov = coverage.Coverage(source=["apps", "config"])
    cov.start()

    result = run_all_tests()

    cov.stop()
    cov.save()

    print("\nCoverage Report:")
    print("=" * 50)
    cov.report()

    cov.html_report(directory="htmlcov")
    print("HTML coverage report generated in 'htmlcov' directory")

    return result


def print_help():
    """Print help information"""
    print("Blog Platform Test Runner")
    print("=" * 30)
    print("Usage:")
    print("  python run_tests.py           # Run all tests")
    print("  python run_tests.py apps      # Run app tests only")
    print("  python run_tests.py security  # Run security tests only")
    print("  python run_tests.py coverage  # Run with coverage report")
    print("  python run_tests.py help      # Show this help")


def main():
    """Main entry point"""
    if len(sys.argv) > 1:
        command = sys.argv[1]

        if command == "apps":
            return run_modules("App tests", APP_TEST_MODULES)
        elif command == "security":
            return run_modules("Security tests", SECURITY_TEST_MODULES)
        elif command == "coverage":
            return run_with_coverage()
        elif command in ["help", "--help", "-h"]:
            print_help()
            return 0
        else:
            print(f"Unknown command: {command}")
            print_help()
            return 1

    return run_all_tests()


if __name__ == "__main__":
    sys.exit(main())
