"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- managers/  → ConvoManager port, the store-backed manager, logging decorator
- dto/       → Request/response bodies (PascalCase wire format)
- common/    → Outcome / Page / Fault returned across the manager boundary

Rules:
- Depends on Domain layer only
- No HTTP/framework code here
"""
