"""
Core domain models, integer math primitives, and event contracts.

This module contains the foundational building blocks that are independent
of external systems (price feeds, asset ledgers, etc.).
"""
