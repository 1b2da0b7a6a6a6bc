"""Core template function machinery for cryptofuncs."""
