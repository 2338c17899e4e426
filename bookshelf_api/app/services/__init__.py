"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks to the
database through the ``Database`` instance it is constructed with.
Services raise the errors from ``core.exceptions``; translating them
into HTTP responses is left to the API layer.
"""
