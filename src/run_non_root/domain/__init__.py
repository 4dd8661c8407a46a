"""Domain layer: identity value objects and the identity resolver."""
