"""
API module of the service.
Routes and request/response models; routers are imported by main.py.
"""
