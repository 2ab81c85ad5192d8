"""
Shared module package.

Contains cross-cutting concerns used by every router:
- Error handling and mapping
- Security middleware
- Rate limiting
- Logging configuration
"""
