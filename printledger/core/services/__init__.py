"""
Core business logic services.

Layer-pure services that depend only on:
- printledger/core/entities/*
- printledger/core/interfaces/*
- printledger/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from printledger.core.services.cost_aggregator import compute_breakdown
from printledger.core.services.fifo_allocator import (
    Allocation,
    FifoAllocator,
    select_fifo_batch,
)
from printledger.core.services.job_lifecycle import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATES,
    apply_transition,
    can_transition,
    ensure_deletable,
)
from printledger.core.services.money import quantize_money
from printledger.core.services.movement_rules import (
    MovementPlan,
    clamp_delta,
    movement_cost,
    plan_movement,
    signed_delta,
    stored_quantity,
)
from printledger.core.services.stock_classifier import (
    classify_batch,
    classify_material,
    classify_material_stock,
)

__all__ = [
    # Classification
    "classify_material_stock",
    "classify_material",
    "classify_batch",
    # FIFO
    "FifoAllocator",
    "Allocation",
    "select_fifo_batch",
    # Movement arithmetic
    "MovementPlan",
    "plan_movement",
    "signed_delta",
    "clamp_delta",
    "stored_quantity",
    "movement_cost",
    # Costing
    "compute_breakdown",
    "quantize_money",
    # Job lifecycle
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATES",
    "apply_transition",
    "can_transition",
    "ensure_deletable",
]
