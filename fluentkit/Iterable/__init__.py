"""Array helpers and the eager and lazy collections."""
