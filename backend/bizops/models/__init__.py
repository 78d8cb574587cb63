from .counterparties import Counterparty, CounterpartyRole
from .inventory import Product
from .banking import Wallet, Payment
from .orders import SalesOrder, SalesOrderLine, PurchaseOrder, PurchaseOrderLine
from .documents import Invoice, DocumentSequence

__all__ = [
    'Counterparty', 'CounterpartyRole',
    'Product',
    'Wallet', 'Payment',
    'SalesOrder', 'SalesOrderLine', 'PurchaseOrder', 'PurchaseOrderLine',
    'Invoice', 'DocumentSequence',
]
