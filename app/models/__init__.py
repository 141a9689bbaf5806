# app/models/__init__.py
from app.models.user import User
from app.models.account import Account
from app.models.category import Category
from app.models.transaction import Transaction

__all__ = ["User", "Account", "Category", "Transaction"]
