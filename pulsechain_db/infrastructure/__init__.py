"""Infrastructure adapters: database access, console output and logging."""
