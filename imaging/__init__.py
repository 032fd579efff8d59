"""imaging: brain-scan image service (generate / edit)."""
