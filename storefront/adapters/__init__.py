"""External adapters for the storefront.

This package contains all external dependencies (SQLite, the command line,
identity sources) and provides implementations of the core port interfaces.

Adapter Organization:

- store/: Order and catalog persistence (SQLite)
- identity/: Who the current caller is
- cli/: Command-line interface, form data and outcome rendering
"""
