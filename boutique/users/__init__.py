from .models import Customer
from .repository import SupabaseCustomerRepository
from .service import ensure_customer

__all__ = ["Customer", "SupabaseCustomerRepository", "ensure_customer"]
