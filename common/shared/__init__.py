"""Configuration, reporting and progress helpers shared by the tools."""
