"""GitHub operations, one module per resource kind."""
