"""Configuration, persistence, security and error types shared by the app."""
