from flowspec.middleware.asgi import FlowSpecMiddleware

__all__ = ["FlowSpecMiddleware"]
