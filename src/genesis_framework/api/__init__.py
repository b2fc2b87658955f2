"""HTTP inspection surface for live agents."""
