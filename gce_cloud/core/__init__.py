"""Core building blocks: errors, context, config, auth, routing and rate limiting."""
