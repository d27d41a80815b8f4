from .main import app, ctx_store, main

__all__ = ["app", "main", "ctx_store"]
