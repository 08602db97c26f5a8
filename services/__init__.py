"""
Service layer for business logic.

This package contains service classes that sit between the HTTP layer and
the statement parser: decoding uploads, summarising results and reporting
imports that produced nothing.
"""
