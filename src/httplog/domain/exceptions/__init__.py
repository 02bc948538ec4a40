"""httplog exception hierarchy."""
