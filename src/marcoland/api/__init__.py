"""HTTP API for the MarcoLand economy."""
