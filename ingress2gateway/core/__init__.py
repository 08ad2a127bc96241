"""Provider-agnostic conversion machinery."""
