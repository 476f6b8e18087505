"""Console presentation for the narrative engine."""
