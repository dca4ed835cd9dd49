from order_intake.core.draft_order import DraftOrder, ValidationReport


def validate_order(draft: DraftOrder) -> ValidationReport:
    """Check the fields an order cannot be confirmed without. Reports every violation."""
    errors = []
    if not draft.customer_name:
        errors.append("Customer name is required")
    if not draft.phone_number:
        errors.append("Phone number is required")
    if not draft.address:
        errors.append("Address is required")
    if not draft.items:
        errors.append("At least one order item is required")
    return ValidationReport(valid=not errors, errors=errors)
