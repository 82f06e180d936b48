"""Small typed expression tree for linear angle relations.

Relations are built as :class:`Eq` objects over :class:`Var`, :class:`Const`
and :class:`Sum` nodes and only turned into text by :func:`render`.  Angle
variables and label variables are kept apart through :attr:`Var.kind` so
renaming and cleanup never have to inspect strings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

ANGLE = "angle"
LABEL = "label"


class EquationError(ValueError):
    """Raised when an equation string cannot be read as a linear relation."""


@dataclass(frozen=True)
class Var:
    name: str
    kind: str = ANGLE


@dataclass(frozen=True)
class Const:
    value: float


Atom = Union[Var, Const]


@dataclass(frozen=True)
class Term:
    coefficient: float
    atom: Atom


@dataclass(frozen=True)
class Sum:
    terms: Tuple[Term, ...]


Expr = Union[Var, Const, Sum]


@dataclass(frozen=True)
class Eq:
    lhs: Expr
    rhs: Expr

    def variables(self) -> Set[Var]:
        return set(_atoms(self.lhs)) | set(_atoms(self.rhs))

    def rename(self, rename: Callable[[Var], Optional[str]]) -> "Eq":
        return Eq(_rename(self.lhs, rename), _rename(self.rhs, rename))

    def is_identity(self) -> bool:
        return render(self.lhs) == render(self.rhs)

    def is_label_assignment(self) -> bool:
        """``angle = label`` in either order."""

        kinds = {getattr(self.lhs, "kind", None), getattr(self.rhs, "kind", None)}
        return isinstance(self.lhs, Var) and isinstance(self.rhs, Var) and kinds == {ANGLE, LABEL}

    def linear_form(self) -> Tuple[Dict[Var, float], float]:
        """Return ``(coefficients, constant)`` with ``Σ coefficient·var = constant``."""

        coefficients: Dict[Var, float] = {}
        constant = 0.0
        for sign, side in ((1.0, self.lhs), (-1.0, self.rhs)):
            for term in _terms(side):
                if isinstance(term.atom, Const):
                    constant -= sign * term.coefficient * term.atom.value
                else:
                    coefficients[term.atom] = coefficients.get(term.atom, 0.0) + sign * term.coefficient
        coefficients = {var: coef for var, coef in coefficients.items() if abs(coef) > 1e-12}
        return coefficients, constant


def var(name: str) -> Var:
    return Var(name, ANGLE)


def label(name: str) -> Var:
    return Var(name, LABEL)


def const(value: float) -> Const:
    return Const(float(value))


def total(*parts: Union[Atom, Tuple[float, Atom]]) -> Expr:
    """Build a sum; ``(coefficient, atom)`` tuples give signed terms."""

    terms: List[Term] = []
    for part in parts:
        if isinstance(part, tuple):
            terms.append(Term(float(part[0]), part[1]))
        else:
            terms.append(Term(1.0, part))
    if len(terms) == 1 and terms[0].coefficient == 1.0:
        return terms[0].atom
    return Sum(tuple(terms))


def sum_of(atoms: Iterable[Atom]) -> Expr:
    return total(*atoms)


def difference(start: Atom, subtract: Iterable[Atom]) -> Expr:
    return total(start, *[(-1.0, atom) for atom in subtract])


def _terms(expr: Expr) -> Tuple[Term, ...]:
    if isinstance(expr, Sum):
        return expr.terms
    return (Term(1.0, expr),)


def _atoms(expr: Expr) -> List[Var]:
    return [term.atom for term in _terms(expr) if isinstance(term.atom, Var)]


def _rename(expr: Expr, rename: Callable[[Var], Optional[str]]) -> Expr:
    def _one(atom: Atom) -> Atom:
        if isinstance(atom, Var):
            new_name = rename(atom)
            if new_name is not None:
                return Var(new_name, atom.kind)
        return atom

    if isinstance(expr, Sum):
        return Sum(tuple(Term(term.coefficient, _one(term.atom)) for term in expr.terms))
    return _one(expr)


def format_number(value: float) -> str:
    """Integers without a decimal point, otherwise at most seven decimals."""

    nearest = round(value)
    if abs(value - nearest) < 1e-9:
        return str(int(nearest))
    text = f"{round(value, 7):.7f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _render_atom(atom: Atom, names: Optional[Callable[[Var], str]]) -> str:
    if isinstance(atom, Const):
        return format_number(atom.value)
    return names(atom) if names is not None else atom.name


def render(node: Union[Expr, Eq], names: Optional[Callable[[Var], str]] = None) -> str:
    """Render to the ``∠ABC+∠CBD=180`` text syntax."""

    if isinstance(node, Eq):
        return f"{render(node.lhs, names)}={render(node.rhs, names)}"

    pieces: List[str] = []
    for index, term in enumerate(_terms(node)):
        coefficient = term.coefficient
        body = _render_atom(term.atom, names)
        if isinstance(term.atom, Const):
            magnitude = format_number(abs(coefficient * term.atom.value))
            negative = coefficient * term.atom.value < 0
        else:
            magnitude = body if abs(abs(coefficient) - 1.0) < 1e-12 else f"{format_number(abs(coefficient))}*{body}"
            negative = coefficient < 0
        if index == 0:
            pieces.append(f"-{magnitude}" if negative else magnitude)
        else:
            pieces.append(f"-{magnitude}" if negative else f"+{magnitude}")
    return "".join(pieces)


_TERM_RE = re.compile(r"([+-]?)\s*(?:(\d+(?:\.\d+)?)\s*\*?\s*)?([^\s+\-=*\d][^\s+\-=*]*)?")


def parse_equation(text: str, labels: Iterable[str] = ()) -> Eq:
    """Parse ``lhs=rhs`` made of ``+``/``-`` separated numbers and names.

    Names listed in ``labels`` become label variables, everything else an
    angle variable.
    """

    label_names = set(labels)
    if text.count("=") != 1:
        raise EquationError(f"expected exactly one '=' in {text!r}")
    left, right = text.split("=")
    return Eq(_parse_side(left, label_names, text), _parse_side(right, label_names, text))


def _parse_side(side: str, label_names: Set[str], source: str) -> Expr:
    stripped = side.strip()
    if not stripped:
        raise EquationError(f"empty side in {source!r}")
    parts: List[Tuple[float, Atom]] = []
    position = 0
    while position < len(stripped):
        match = _TERM_RE.match(stripped, position)
        if match is None or match.end() == position:
            raise EquationError(f"cannot parse {stripped[position:]!r} in {source!r}")
        sign, number, name = match.groups()
        if number is None and name is None:
            raise EquationError(f"dangling sign in {source!r}")
        factor = -1.0 if sign == "-" else 1.0
        if name is None:
            parts.append((1.0, Const(factor * float(number))))
        else:
            coefficient = factor * (float(number) if number is not None else 1.0)
            kind = LABEL if name in label_names else ANGLE
            parts.append((coefficient, Var(name, kind)))
        position = match.end()
        while position < len(stripped) and stripped[position].isspace():
            position += 1
    return total(*parts)
