"""Application layer: store interfaces, DTOs and services.

Depends only on domain and protocol definitions. Infrastructure implements
the interfaces.
"""
