"""
Auth package for File Vault.

Provides HTTP Basic authentication against the bcrypt hashes held by the
credential store, exposed to routes as a FastAPI dependency.
"""
