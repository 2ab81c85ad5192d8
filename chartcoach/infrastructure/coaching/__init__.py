"""
Infrastructure adapters for the coaching bounded context.

Each adapter implements a domain port (ABC) and connects
to an external system: Postgres, an OpenAI-compatible API, the filesystem.
"""
