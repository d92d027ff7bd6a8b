"""
Expense Tracker - Core Package

A personal expense tracker: record expenses by hand or by voice, keep
them under a budget, and see where the money went.

DESIGN PRINCIPLES:
1. Voice suggests -> Human confirms -> Log records
2. The expense log is the single source of truth
3. Every summary is recomputed from the log
4. Storage failures never block the user
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
