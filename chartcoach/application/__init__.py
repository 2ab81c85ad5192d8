"""
Application layer package.

Contains use cases that orchestrate domain logic.
Each use case is a single class, usually with one public method.
This layer depends on domain ports, never on infrastructure.
"""
