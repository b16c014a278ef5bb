"""Element and action layers."""
