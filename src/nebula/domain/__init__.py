"""Domain model for the scene graph and play sessions."""
