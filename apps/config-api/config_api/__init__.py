"""Configuration API: serves app configuration documents to mobile and web clients."""
