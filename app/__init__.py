"""
HTTP layer for statement import.
"""
