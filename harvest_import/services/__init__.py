"""Import source, page fetching and the host-side import services."""
