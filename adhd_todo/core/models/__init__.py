"""Domain enums and API I/O schemas."""
