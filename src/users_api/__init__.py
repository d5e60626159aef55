"""users-api - user account service keyed by Keycloak subject identifiers."""

__version__ = "1.0.0"
