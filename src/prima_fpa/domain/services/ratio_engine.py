# src/prima_fpa/domain/services/ratio_engine.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Financial ratio evaluation engine.

Purpose:
    Evaluate a catalog of insurance and profitability ratios (combined ratio,
    loss ratio, expense ratio, margins) over per-measure totals. Ratios are
    defined as small arithmetic formulas over measure codes, e.g.
    ``(Claims + Opex) / GWP * 100``.

Layer:
    domain

Notes:
    - This module is pure domain logic:
        * No logging.
        * No HTTP concerns.
        * No persistence.
    - Formulas are parsed with :mod:`ast` and walked by a restricted
      evaluator: numeric literals, measure names, ``+ - * / **`` and unary
      signs only. Nothing is passed to ``eval``.
    - Errors are surfaced as structured RatioFailure instances instead of
      exceptions, allowing callers to reason about partial success.
"""

from __future__ import annotations

import ast
import math
import operator
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from prima_fpa.domain.enums.measure import DisplayFormat, Measure


class RatioCategory(str, Enum):
    """High-level grouping of ratios for display."""

    INSURANCE = "insurance"
    PROFITABILITY = "profitability"


class RatioFailureReason(str, Enum):
    """Reasons why a ratio could not be evaluated."""

    MISSING_INPUT = "MISSING_INPUT"
    ZERO_DENOMINATOR = "ZERO_DENOMINATOR"
    INVALID_FORMULA = "INVALID_FORMULA"


@dataclass(frozen=True, slots=True)
class RatioDefinition:
    """Named ratio and the formula that computes it.

    Attributes:
        code: Stable identifier (``combined_ratio``).
        name: Human-readable label.
        formula: Arithmetic expression over measure codes.
        category: Display grouping.
        display_format: How the value is rendered.
        description: Short definition for tooltips and docs.
    """

    code: str
    name: str
    formula: str
    category: RatioCategory
    display_format: DisplayFormat = DisplayFormat.PERCENTAGE
    description: str = ""


@dataclass(frozen=True, slots=True)
class RatioFailure:
    """Structured failure record for one ratio."""

    code: str
    reason: RatioFailureReason
    details: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RatioEvaluationResult:
    """Result of evaluating several ratios.

    Attributes:
        values: Ratio code -> value, for ratios that evaluated successfully.
        failures: Ratios that could not be evaluated, in catalog order.
    """

    values: dict[str, float]
    failures: tuple[RatioFailure, ...]


DEFAULT_RATIOS: tuple[RatioDefinition, ...] = (
    RatioDefinition(
        code="combined_ratio",
        name="Combined Ratio",
        formula="(Claims + Opex) / GWP * 100",
        category=RatioCategory.INSURANCE,
        description="Claims plus operating expenses as a share of gross written premium.",
    ),
    RatioDefinition(
        code="loss_ratio",
        name="Loss Ratio",
        formula="Claims / GWP * 100",
        category=RatioCategory.INSURANCE,
        description="Claims as a share of gross written premium.",
    ),
    RatioDefinition(
        code="expense_ratio",
        name="Expense Ratio",
        formula="Opex / GWP * 100",
        category=RatioCategory.INSURANCE,
        description="Operating expenses as a share of gross written premium.",
    ),
    RatioDefinition(
        code="gross_margin",
        name="Gross Margin",
        formula="(Revenue - COGS) / Revenue * 100",
        category=RatioCategory.PROFITABILITY,
    ),
    RatioDefinition(
        code="ebitda_margin",
        name="EBITDA Margin",
        formula="EBITDA / Revenue * 100",
        category=RatioCategory.PROFITABILITY,
    ),
)


# --------------------------------------------------------------------------- #
# Internal error types                                                        #
# --------------------------------------------------------------------------- #


class RatioError(Exception):
    """Base class for ratio evaluation errors."""


class InvalidFormulaError(RatioError):
    """Raised when a formula uses unsupported syntax."""


class MissingInputError(RatioError):
    """Raised when a formula references a measure with no total."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name


class ZeroDenominatorError(RatioError):
    """Raised when a formula divides by zero."""


# --------------------------------------------------------------------------- #
# Restricted evaluator                                                        #
# --------------------------------------------------------------------------- #

_BINARY_OPERATORS: dict[type[ast.operator], Callable[[float, float], float]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS: dict[type[ast.unaryop], Callable[[float], float]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def _parse(formula: str) -> ast.Expression:
    try:
        return ast.parse(formula.strip(), mode="eval")
    except SyntaxError as exc:
        raise InvalidFormulaError(f"syntax error at offset {exc.offset}") from exc


def formula_inputs(formula: str) -> frozenset[str]:
    """Return the measure names referenced by ``formula``.

    Raises:
        InvalidFormulaError: If the formula cannot be parsed.
    """
    tree = _parse(formula)
    return frozenset(node.id for node in ast.walk(tree) if isinstance(node, ast.Name))


def _evaluate_node(node: ast.AST, inputs: Mapping[str, float]) -> float:
    if isinstance(node, ast.Expression):
        return _evaluate_node(node.body, inputs)
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, int | float):
            raise InvalidFormulaError(f"unsupported literal {node.value!r}")
        return float(node.value)
    if isinstance(node, ast.Name):
        if node.id not in inputs:
            raise MissingInputError(node.id)
        return inputs[node.id]
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
        return _UNARY_OPERATORS[type(node.op)](_evaluate_node(node.operand, inputs))
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPERATORS:
        left = _evaluate_node(node.left, inputs)
        right = _evaluate_node(node.right, inputs)
        if isinstance(node.op, ast.Div) and right == 0:
            raise ZeroDenominatorError
        try:
            result = _BINARY_OPERATORS[type(node.op)](left, right)
        except ZeroDivisionError as exc:
            raise ZeroDenominatorError from exc
        except OverflowError as exc:
            raise InvalidFormulaError("numeric overflow") from exc
        if isinstance(result, complex):
            raise InvalidFormulaError("formula produced a complex result")
        return result
    raise InvalidFormulaError(f"unsupported expression {type(node).__name__}")


def evaluate_formula(formula: str, inputs: Mapping[str, float]) -> float:
    """Evaluate ``formula`` against named inputs.

    Raises:
        InvalidFormulaError: Unsupported syntax.
        MissingInputError: A referenced name is absent from ``inputs``.
        ZeroDenominatorError: A division by zero occurred.
    """
    return _evaluate_node(_parse(formula), inputs)


def measure_inputs(totals: Mapping[Measure, float]) -> dict[str, float]:
    """Key measure totals by measure code for use as formula inputs."""
    return {measure.value: value for measure, value in totals.items()}


def evaluate_ratios(
    inputs: Mapping[str, float],
    definitions: Iterable[RatioDefinition] = DEFAULT_RATIOS,
    codes: Iterable[str] | None = None,
) -> RatioEvaluationResult:
    """Evaluate ratio definitions against measure totals.

    Args:
        inputs: Measure code -> total (see :func:`measure_inputs`).
        definitions: Ratio catalog to evaluate.
        codes: Optional subset of ratio codes. Unknown codes are reported
            as ``INVALID_FORMULA`` failures.

    Returns:
        :class:`RatioEvaluationResult` with successful values and failures.
    """
    catalog = ratio_catalog(definitions)
    wanted = list(catalog) if codes is None else list(dict.fromkeys(codes))

    values: dict[str, float] = {}
    failures: list[RatioFailure] = []
    for code in wanted:
        definition = catalog.get(code)
        if definition is None:
            failures.append(
                RatioFailure(code, RatioFailureReason.INVALID_FORMULA, {"error": "unknown ratio"})
            )
            continue
        try:
            value = evaluate_formula(definition.formula, inputs)
        except MissingInputError as exc:
            failures.append(
                RatioFailure(code, RatioFailureReason.MISSING_INPUT, {"input": exc.name})
            )
            continue
        except ZeroDenominatorError:
            failures.append(
                RatioFailure(code, RatioFailureReason.ZERO_DENOMINATOR, {"formula": definition.formula})
            )
            continue
        except InvalidFormulaError as exc:
            failures.append(
                RatioFailure(code, RatioFailureReason.INVALID_FORMULA, {"error": str(exc)})
            )
            continue
        if not math.isfinite(value):
            failures.append(
                RatioFailure(code, RatioFailureReason.INVALID_FORMULA, {"error": "non-finite result"})
            )
            continue
        values[code] = value

    return RatioEvaluationResult(values=values, failures=tuple(failures))


def ratio_catalog(definitions: Iterable[RatioDefinition] = DEFAULT_RATIOS) -> dict[str, RatioDefinition]:
    """Return the catalog keyed by ratio code."""
    return {definition.code: definition for definition in definitions}


__all__ = [
    "DEFAULT_RATIOS",
    "InvalidFormulaError",
    "MissingInputError",
    "RatioCategory",
    "RatioDefinition",
    "RatioEvaluationResult",
    "RatioFailure",
    "RatioFailureReason",
    "ZeroDenominatorError",
    "evaluate_formula",
    "evaluate_ratios",
    "formula_inputs",
    "measure_inputs",
    "ratio_catalog",
]
