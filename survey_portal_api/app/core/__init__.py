"""Infrastructure shared by services and routes."""
