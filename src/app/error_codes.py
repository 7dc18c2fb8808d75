"""Stable error codes returned in Error.code

Clients branch on these values; never rename one.
"""

# Validation
ITEMS_REQUIRED = "ITEMS_REQUIRED"
INVALID_AMOUNT = "INVALID_AMOUNT"
INVALID_QUANTITY = "INVALID_QUANTITY"

# Referential
OUTLET_NOT_FOUND = "OUTLET_NOT_FOUND"
CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
INVOICE_NOT_FOUND = "INVOICE_NOT_FOUND"
PAYMENT_NOT_FOUND = "PAYMENT_NOT_FOUND"

# Business rules
INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
HAS_EXISTING_PAYMENT = "HAS_EXISTING_PAYMENT"
OUTSIDE_DELETE_WINDOW = "OUTSIDE_DELETE_WINDOW"
CUSTOMER_HAS_INVOICES = "CUSTOMER_HAS_INVOICES"
CREDIT_LIMIT_EXCEEDED = "CREDIT_LIMIT_EXCEEDED"
INVOICE_CUSTOMER_MISMATCH = "INVOICE_CUSTOMER_MISMATCH"

# Storage / unexpected
TRANSACTION_FAILED = "TRANSACTION_FAILED"
RECONCILIATION_FAILED = "RECONCILIATION_FAILED"

# API boundary
UNAUTHORIZED = "UNAUTHORIZED"
INVALID_RECEIPT = "INVALID_RECEIPT"

NOT_FOUND_CODES = frozenset({
    OUTLET_NOT_FOUND,
    CUSTOMER_NOT_FOUND,
    PRODUCT_NOT_FOUND,
    INVOICE_NOT_FOUND,
    PAYMENT_NOT_FOUND,
})

BUSINESS_RULE_CODES = frozenset({
    INSUFFICIENT_STOCK,
    HAS_EXISTING_PAYMENT,
    OUTSIDE_DELETE_WINDOW,
    CUSTOMER_HAS_INVOICES,
    CREDIT_LIMIT_EXCEEDED,
    INVOICE_CUSTOMER_MISMATCH,
})
