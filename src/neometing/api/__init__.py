"""HTTP front-end."""
