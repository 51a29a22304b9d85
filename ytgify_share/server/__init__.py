"""ytgify-share HTTP server: API routers, services, middleware and configuration."""
