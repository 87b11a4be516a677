"""Small parsing helpers shared by the runtime."""
