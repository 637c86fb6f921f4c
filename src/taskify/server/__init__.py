"""
HTTP backend for Taskify: FastAPI application, routers and services.
"""
