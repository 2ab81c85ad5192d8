"""
Coaching bounded context, domain layer.

Entities, errors, ports, pair rules and the coercion of LLM replies
into well-formed analyses, guides, quizzes and models.
"""
