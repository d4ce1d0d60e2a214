"""HTTP clients for outbound calls to Harvest."""
