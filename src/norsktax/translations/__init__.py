"""Translation catalogues shipped as package data."""
