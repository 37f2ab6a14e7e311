"""LeafSight — leaf contour classification."""
