from .inventory import Supplier, Category, Item
