"""Domain layer - backend-independent types and rules."""
