"""
Core math primitives, domain records and payload contracts.

Everything here is pure and independent of any presentation layer.
"""
