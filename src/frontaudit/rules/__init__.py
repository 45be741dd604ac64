"""Rule model, loading and persistence."""
