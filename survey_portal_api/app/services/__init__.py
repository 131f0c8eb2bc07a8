"""
Service layer abstraction.

Each service encapsulates business logic for a domain and receives
its collaborators (record store, avatar lookup) at construction, so
the API handlers never touch persistence directly.
"""
