"""Core domain: user record schema, error taxonomy and repository protocol."""
