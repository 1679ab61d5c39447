"""Client for the rewards backend REST API."""
