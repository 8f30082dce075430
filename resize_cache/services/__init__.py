"""Cache, producer and logging services."""
