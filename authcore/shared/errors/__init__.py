from .base import AppError, DomainError, InfrastructureError

__all__ = [
    "AppError",
    "DomainError",
    "InfrastructureError",
]
