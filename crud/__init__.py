from .references import resolve, resolve_supplier, resolve_category, list_references, seed_defaults
from .inventory import get_item, get_items, create_item, update_item, soft_delete_item, undelete_item, bulk_import_items
from .reports import export_csv, parse_csv, get_summary
