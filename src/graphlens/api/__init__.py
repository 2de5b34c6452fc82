"""HTTP surface for Graphlens."""
