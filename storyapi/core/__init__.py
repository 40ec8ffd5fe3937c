"""
Core utilities shared across the story API.

This package hosts:
- configuration helpers (env vars, token secrets, timeouts)
- cross-cutting concerns such as logging, password hashing, deadlines and the
  JSON response envelope.

Services and repositories should depend on these primitives instead of reading
os.environ or building responses themselves.
"""
