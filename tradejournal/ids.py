"""Identifier generation for journal records."""

import uuid


def generate_trade_id() -> str:
    """Generate a unique trade ID."""
    return f"TRD-{uuid.uuid4().hex[:16]}"


def generate_platform_id() -> str:
    """Generate a unique platform ID."""
    return f"PLT-{uuid.uuid4().hex[:12]}"


def generate_transaction_id() -> str:
    """Generate a unique balance transaction ID."""
    return f"TXN-{uuid.uuid4().hex[:16]}"
