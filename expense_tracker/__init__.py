"""
Expense Tracker - Source Package

A small command-line tool for recording personal expenses in a local
JSON file.

DESIGN PRINCIPLES:
1. Validate before touching storage
2. Fail early, fail visibly
3. One command = at most one write
4. Every operation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
