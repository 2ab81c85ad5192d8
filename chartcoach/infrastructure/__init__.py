"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer: SQL storage, the LLM provider,
prompt templates and client-side key-value storage.
"""
