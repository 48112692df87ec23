"""Blog API: password login, stateless session tokens, owner-scoped posts."""

__version__ = "0.1.0"
