"""Built-in transformer catalogue (one module per transformer family)."""
