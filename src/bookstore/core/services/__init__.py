"""Core services.

- book: book domain service and validation rules
- database: engine ownership and session scopes
"""
