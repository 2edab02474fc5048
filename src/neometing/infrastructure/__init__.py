"""Infrastructure: upstream integrations, providers and observability."""
