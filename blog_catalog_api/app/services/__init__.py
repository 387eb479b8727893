"""
Service layer abstraction.

Each service encapsulates business logic for a domain.  Services raise
the exceptions from ``core.errors``; API handlers never translate them
themselves.
"""
