"""PresuX: small-business management backend (clients, suppliers, catalog, personnel)."""

__version__ = "0.1.0"
