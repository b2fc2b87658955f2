"""Infrastructure helpers: logging, configuration parsing, storage."""
