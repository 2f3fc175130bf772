"""HTTP surface of the search gateway."""
