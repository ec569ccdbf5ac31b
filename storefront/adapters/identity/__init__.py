"""Identity adapters supplying the current principal name."""
