"""
Presentation Layer - API endpoints and request/response handling.

This layer contains:
- api/: FastAPI routers and endpoints
- contracts/: per-request orchestration and response headers
- dependencies/: caller identity and paging parameters read from the request
"""
