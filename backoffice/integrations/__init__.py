"""HTTP clients for the pricing engine and the inventory service."""
