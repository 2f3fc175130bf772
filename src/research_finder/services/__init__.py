"""Gateway services: validation, rate limiting, normalization, orchestration."""
