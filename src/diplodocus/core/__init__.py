"""Request resolution and page composition."""
