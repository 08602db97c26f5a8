"""
Core processing modules for statement text import.

This package contains:
- categories: Taxonomy-based category resolution
- config: Application configuration and settings
- exceptions: Custom exception classes
- extractors: Structured and generic row extraction
- logger: Logging configuration
- normalize: Amount and date normalization
- parsing: Header detection and the parse entry point
- rules: Keyword heuristics as ordered rules
- schema: Pydantic models for parsed entries
- taxonomy: Category taxonomy loading
- tokenizer: Character-level CSV tokenizer
"""
