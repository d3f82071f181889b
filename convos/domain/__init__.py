"""
DOMAIN LAYER - Conversations and Messages

This layer contains:
- Entities: Conversation and Message (with its reply thread)
- Value Objects: ResultCode and Result (the internal outcome taxonomy)
- Ports: Interfaces the infrastructure implements (Store, ServerCache)

RULES:
1. NO framework imports (no FastAPI, Pydantic, Redis, psycopg)
2. NO I/O operations
3. Only depends on Python stdlib
"""
