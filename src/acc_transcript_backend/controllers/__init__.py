"""Request handling logic behind the API routers."""
