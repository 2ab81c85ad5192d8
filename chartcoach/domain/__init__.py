"""
Domain layer package.

Contains pure business logic: entities, JSON-shape coercion rules
and port interfaces. No framework imports, no IO, no side effects.
"""
