"""Language model integration."""
