"""
Module: assembly.controller

Purpose:
    Orchestrate the complete assembly pipeline.
    Validate → Size → Assemble → Diagnose → Report

Key Functions:
    - run_assembly(): Main entry point for an assembly run

Key Classes:
    - AssemblyReport: Complete run result
    - AssemblyError: Exception for rejected runs

Dependencies:
    - core.schemas: Input validation
    - assembly.length: Target size when none is configured
    - assembly.parallel: Form generation
    - assembly.balance: Diagnostics
    - assembly.versions: Scrambled versions

Used By:
    - assessment_toolkit.cli: Command line entry point
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from assessment_toolkit.core.models import (
    BalanceReport,
    Constraint,
    Item,
    LengthRecommendation,
)
from assessment_toolkit.core.schemas import (
    InvalidInputError,
    validate_constraints,
    validate_form_count,
    validate_pool,
    validate_target_size,
)

from .assembler import assemble_test
from .balance import check_content_balance
from .config import AssemblyConfig
from .length import optimize_test_length
from .parallel import ParallelFormsResult, generate_parallel_forms
from .strategies import get_strategy
from .versions import FormVersion, scramble_versions

logger = logging.getLogger(__name__)


class AssemblyError(Exception):
    """Error rejecting an assembly run."""
    pass


@dataclass(frozen=True)
class AssemblyReport:
    """
    Complete assembly result (immutable).

    Attributes:
        forms: Generated forms with equivalence diagnostics
        target_size: Items per form used for the run
        length_recommendation: Optimizer output when target_size was derived
        balance: Balance report per form (empty if disabled)
        versions: Scrambled versions per form (empty if none requested)
        warnings: Degraded outcomes worth surfacing
        elapsed_seconds: Wall time of the run

    Example:
        >>> report = run_assembly(pool, constraints, AssemblyConfig(target_size=20))
        >>> report.forms[0].item_count
        20
    """
    forms: ParallelFormsResult
    target_size: int
    length_recommendation: Optional[LengthRecommendation]
    balance: Tuple[BalanceReport, ...]
    versions: Tuple[Tuple[FormVersion, ...], ...]
    warnings: Tuple[str, ...]
    elapsed_seconds: float

    def to_dict(self) -> dict:
        data = self.forms.to_dict()
        for form_data, report in zip(data["forms"], self.balance):
            form_data["balance"] = report.to_dict()
        for form_data, versions in zip(data["forms"], self.versions):
            form_data["versions"] = [version.to_dict() for version in versions]
        data.update(
            {
                "target_size": self.target_size,
                "length_recommendation": (
                    self.length_recommendation.to_dict() if self.length_recommendation else None
                ),
                "warnings": list(self.warnings),
                "elapsed_seconds": round(self.elapsed_seconds, 4),
            }
        )
        return data


def run_assembly(
    pool: Sequence[Item],
    constraints: Sequence[Constraint],
    config: Optional[AssemblyConfig] = None,
) -> AssemblyReport:
    """
    Assemble one or more forms from start to finish.

    Pipeline:
    1. Validate pool, constraints and sizes
    2. Determine the target size (config or length optimizer)
    3. Generate the forms (one form is a one-element run)
    4. Run balance diagnostics per form
    5. Scramble versions if requested
    6. Collect warnings for degraded outcomes

    Args:
        pool: Item pool
        constraints: Weighted constraints
        config: Run configuration (default: AssemblyConfig())

    Returns:
        AssemblyReport

    Raises:
        AssemblyError: If the inputs are invalid
    """
    config = config or AssemblyConfig()
    warnings: List[str] = []
    start_time = time.perf_counter()

    logger.info(
        f"Starting assembly: {len(pool)} items, {len(constraints)} constraints, "
        f"{config.number_of_forms} form(s), strategy {config.strategy}"
    )

    # 1. Validate
    try:
        validate_pool(pool)
        validate_constraints(constraints)
        validate_form_count(config.number_of_forms)
        if config.target_size is not None:
            validate_target_size(config.target_size)
    except InvalidInputError as e:
        raise AssemblyError(f"Invalid input: {e}") from e

    # 2. Size
    recommendation: Optional[LengthRecommendation] = None
    if config.target_size is None:
        try:
            recommendation = optimize_test_length(
                pool,
                constraints,
                config.min_length,
                config.max_length,
                config.target_reliability,
            )
        except InvalidInputError as e:
            raise AssemblyError(f"Invalid length options: {e}") from e
        target_size = recommendation.recommended_length
        logger.info(f"Length optimizer recommends {target_size} items")
    else:
        target_size = config.target_size

    # 3. Assemble
    strategy = get_strategy(config.strategy, seed=config.seed)
    if target_size > len(pool):
        # Too small for even one full form: the whole pool becomes one undersized form
        form = assemble_test(pool, constraints, target_size, strategy=strategy)
        forms = ParallelFormsResult(
            forms=(form,),
            equivalence=(),
            used_ids=frozenset(form.item_ids),
            requested_forms=config.number_of_forms,
        )
    else:
        forms = generate_parallel_forms(
            pool, constraints, target_size, config.number_of_forms, strategy=strategy
        )

    if len(forms) < config.number_of_forms:
        warnings.append(
            f"Only {len(forms)} of {config.number_of_forms} forms could be assembled "
            f"from {len(pool)} items"
        )
    for label, form in zip(forms.version_labels, forms):
        if form.is_undersized:
            warnings.append(f"Form {label} holds {form.item_count} of {target_size} items")
        if form.unmet_constraints:
            warnings.append(f"Form {label}: constraints below threshold: {', '.join(form.unmet_constraints)}")
    warnings.extend(forms.equivalence_issues())

    # 4. Diagnose
    balance: Tuple[BalanceReport, ...] = ()
    if config.check_balance:
        balance = tuple(check_content_balance(form.selected_items, constraints) for form in forms)

    # 5. Versions
    versions: Tuple[Tuple[FormVersion, ...], ...] = ()
    if config.versions:
        versions = tuple(
            tuple(scramble_versions(form, config.versions, seed=f"{config.seed}-{label}"))
            for label, form in zip(forms.version_labels, forms)
        )

    for warning in warnings:
        logger.warning(warning)

    elapsed = time.perf_counter() - start_time
    logger.info(f"Assembly complete: {len(forms)} form(s) of {target_size} items in {elapsed:.2f}s")

    return AssemblyReport(
        forms=forms,
        target_size=target_size,
        length_recommendation=recommendation,
        balance=balance,
        versions=versions,
        warnings=tuple(warnings),
        elapsed_seconds=elapsed,
    )
