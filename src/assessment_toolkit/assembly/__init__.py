"""
Module: assembly

Purpose:
    Constraint-based assembly engine. Selects a bounded subset of items
    from a pool to satisfy weighted structural constraints, generates
    non-overlapping parallel forms, recommends an assessment length and
    diagnoses content balance.

Key Functions:
    - assemble_test(): Assemble one form
    - generate_parallel_forms(): Assemble several non-overlapping forms
    - optimize_test_length(): Recommend a length
    - check_content_balance(): Balance diagnostics
    - run_assembly(): Main entry point for a full run

Key Classes:
    - AssemblyConfig: Configuration for a run
    - SelectionStrategy / ScoringPolicy: Pluggable search and objective

Dependencies:
    - numpy: Equivalence vectors and matrix
    - assessment_toolkit.core.models: Item, Constraint, results

Used By:
    - assessment_toolkit.cli: Command line entry point
"""

from .evaluators import evaluate_constraint, get_evaluator, EVALUATORS
from .scoring import ScoringPolicy, WeightedSumPolicy, check_constraints, sort_by_priority
from .strategies import (
    SelectionStrategy,
    GreedyStrategy,
    AnnealingStrategy,
    RandomStrategy,
    get_strategy,
)
from .assembler import Assembler, assemble_test
from .parallel import (
    FormEquivalence,
    ParallelFormsResult,
    assemble_next_form,
    compare_distributions,
    compare_forms,
    form_label,
    generate_parallel_forms,
)
from .versions import FormVersion, scramble_versions
from .length import estimate_reliability, optimize_test_length
from .balance import check_content_balance
from .config import AssemblyConfig
from .controller import AssemblyError, AssemblyReport, run_assembly

__all__ = [
    # Evaluation
    "evaluate_constraint",
    "get_evaluator",
    "EVALUATORS",
    "ScoringPolicy",
    "WeightedSumPolicy",
    "check_constraints",
    "sort_by_priority",
    # Selection
    "SelectionStrategy",
    "GreedyStrategy",
    "AnnealingStrategy",
    "RandomStrategy",
    "get_strategy",
    "Assembler",
    "assemble_test",
    # Parallel forms
    "FormEquivalence",
    "ParallelFormsResult",
    "assemble_next_form",
    "compare_distributions",
    "compare_forms",
    "form_label",
    "generate_parallel_forms",
    "FormVersion",
    "scramble_versions",
    # Diagnostics
    "estimate_reliability",
    "optimize_test_length",
    "check_content_balance",
    # Pipeline
    "AssemblyConfig",
    "AssemblyError",
    "AssemblyReport",
    "run_assembly",
]
