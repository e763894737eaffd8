"""Content discovery: search, classification, ranking and topic extraction."""
