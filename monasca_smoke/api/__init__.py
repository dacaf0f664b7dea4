"""Request/response schemas and the webhook callback app."""
