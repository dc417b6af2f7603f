"""Report renderers — terminal (Rich) and JSON."""
