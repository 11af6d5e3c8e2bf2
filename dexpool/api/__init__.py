"""HTTP API for the exchange."""
