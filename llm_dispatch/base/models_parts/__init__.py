"""One-class-per-file DTO implementations; import from ``base.models``."""
