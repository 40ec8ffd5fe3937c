"""
High-level use cases for the story API.

Each service module orchestrates repositories/adapters to implement business
rules (word-count classification, duplicate-credential checks, token
issuance). Routers call these services instead of touching sessions directly.
"""
