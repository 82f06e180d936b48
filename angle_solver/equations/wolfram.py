"""Query building for Wolfram|Alpha from the simplified equations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from urllib.parse import quote

from ..angles import GREEK_LETTERS
from ..config import SolverConfig
from ..model import SolveData
from .expr import LABEL, Eq, Var, render
from .extract import extract_relations
from .simplify import simplify_equations

logger = logging.getLogger(__name__)

WOLFRAM_URL = "https://www.wolframalpha.com/input?i="

_GREEK_WORDS: Dict[str, str] = dict(GREEK_LETTERS)


def greek_to_words(text: str) -> str:
    return "".join(_GREEK_WORDS.get(char, char) for char in text)


def _display_name(variable: Var) -> str:
    if variable.kind == LABEL:
        return greek_to_words(variable.name)
    return variable.name


def clean_relations(equations: Sequence[Eq]) -> List[Eq]:
    """Drop identities such as ``a=a`` and bare ``a=α`` label assignments."""

    return [
        equation
        for equation in equations
        if not equation.is_identity() and not equation.is_label_assignment()
    ]


def clean_equations(equations: Sequence[Eq]) -> List[str]:
    rendered = [render(equation, _display_name) for equation in clean_relations(equations)]
    return list(dict.fromkeys(rendered))


def build_query(equations: Sequence[str], targets: Sequence[str] = ()) -> str:
    prefix = f"solve for {', '.join(targets)}:" if targets else "solve"
    return f"{prefix} {{{', '.join(equations)}}}"


def wolfram_url(equations: Sequence[str], targets: Sequence[str] = ()) -> str:
    return WOLFRAM_URL + quote(build_query(equations, targets), safe="-_.!~*'()")


@dataclass
class EquationExtractionResult:
    equations: List[str]
    simplified: List[str]
    wolfram_url: str
    mapping: Dict[str, str] = field(default_factory=dict)
    reverse_mapping: Dict[str, List[str]] = field(default_factory=dict)


def extract_equations_with_wolfram(
    data: SolveData, *, config: Optional[SolverConfig] = None
) -> EquationExtractionResult:
    relations = extract_relations(data, config=config)
    simplified = simplify_equations(relations, data, config=config)
    cleaned = clean_equations(simplified.equations)

    targets = list(
        dict.fromkeys(simplified.mapping[angle.name] for angle in data.targets() if angle.name in simplified.mapping)
    )
    url = wolfram_url(cleaned, targets)
    logger.debug("Wolfram query for %d equation(s), targets %s", len(cleaned), targets)
    return EquationExtractionResult(
        equations=[render(equation) for equation in relations],
        simplified=cleaned,
        wolfram_url=url,
        mapping=simplified.mapping,
        reverse_mapping=simplified.reverse_mapping,
    )
