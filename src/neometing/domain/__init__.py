"""Domain layer: records, provider interface and errors."""
