"""Formula export for fitted polynomials (LaTeX and Python source)."""

from __future__ import annotations

import keyword
import re
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import DimensionMismatch
from .result import FitCollection, FitResult

Fits = Union[FitResult, FitCollection, Sequence[FitResult]]
Variables = Union[Mapping[str, str], Sequence[str], None]

LATEX_VALUE_FORMAT = r"\num{%#.4e}"


def _as_fits(fits: Fits) -> Tuple[FitResult, ...]:
    if isinstance(fits, FitResult):
        return (fits,)
    out = tuple(fits)
    if not all(isinstance(f, FitResult) for f in out):
        raise TypeError("Export expects FitResult objects.")
    return out


def _rename(fit: FitResult, variables: Variables) -> Tuple[str, ...]:
    """Map a fit's labels to output names (dict by label, or positional)."""
    if variables is None:
        return tuple(fit.labels)
    if isinstance(variables, Mapping):
        return tuple(str(variables.get(lab, lab)) for lab in fit.labels)
    names = tuple(str(v) for v in variables)
    if len(names) != fit.nvars:
        raise DimensionMismatch(
            f"Got {len(names)} variable names for fit {fit.name!r} with {fit.nvars} variables."
        )
    return names


def _write(text: str, path: Optional[Union[str, Path]]) -> str:
    if path is not None:
        Path(path).write_text(text, encoding="utf-8")
    return text


# ---- LaTeX -----------------------------------------------------------------


def _latex_monomial(exps: Tuple[int, ...], names: Sequence[str]) -> str:
    parts = []
    for name, e in zip(names, exps):
        if e == 1:
            parts.append(name)
        elif e > 1:
            parts.append(f"{name}^{{{e}}}")
    return " ".join(parts)


def _latex_polynomial(fit: FitResult, piece: int, names: Sequence[str], fmt: str) -> str:
    out: List[str] = []
    for c, exps in fit.terms(piece):
        if c == 0.0:
            continue
        mono = _latex_monomial(exps, names)
        value = fmt % abs(c)
        body = f"{value} {mono}".strip()
        if not out:
            out.append(("-" if c < 0 else "") + body)
        else:
            out.append(("- " if c < 0 else "+ ") + body)
    return " ".join(out) if out else "0"


def _latex_fit(fit: FitResult, names: Sequence[str], fmt: str, env: str) -> str:
    args = ",".join(names)
    lines = [f"%% {fit.name}({args})", f"\\begin{{{env}}}"]
    head = f"{fit.name}\\!\\left({args}\\right) &= "
    if not fit.is_piecewise:
        lines.append(head + _latex_polynomial(fit, 0, names, fmt) + ";")
    else:
        lower = _latex_polynomial(fit, 0, names, fmt)
        upper = _latex_polynomial(fit, 1, names, fmt)
        split = fmt % fit.split
        lines.append(
            head
            + "\\begin{cases} "
            + f"{lower}, & {names[0]} \\leq {split} \\\\ "
            + f"{upper}, & \\text{{otherwise}}"
            + " \\end{cases};"
        )
    lines.append(f"\\end{{{env}}}")
    return "\n".join(lines)


def to_latex(
    fits: Fits,
    path: Optional[Union[str, Path]] = None,
    *,
    variables: Variables = None,
    fmt: str = LATEX_VALUE_FORMAT,
    env: str = "align",
) -> str:
    """Render fits as LaTeX equations (requires siunitx for the default fmt).

    variables: dict mapping labels to TeX (e.g. {"alpha": r"\\alpha"}) or a
    positional sequence of names. Written to `path` when given.
    """
    blocks = ["% THIS FILE HAS BEEN WRITTEN BY pwpfit.export.to_latex %", ""]
    for fit in _as_fits(fits):
        blocks.append(_latex_fit(fit, _rename(fit, variables), fmt, env))
        blocks.append("")
    return _write("\n".join(blocks), path)


# ---- Python ----------------------------------------------------------------


def _identifier(name: str) -> str:
    ident = re.sub(r"\W", "_", str(name))
    if not ident or ident[0].isdigit() or keyword.iskeyword(ident):
        ident = "f_" + ident
    return ident


def _python_polynomial(fit: FitResult, piece: int, names: Sequence[str]) -> str:
    out: List[str] = []
    for c, exps in fit.terms(piece):
        if c == 0.0:
            continue
        factors = [repr(float(c))]
        for name, e in zip(names, exps):
            if e == 1:
                factors.append(name)
            elif e > 1:
                factors.append(f"{name}**{e}")
        out.append(" * ".join(factors))
    return " + ".join(out).replace("+ -", "- ") if out else "0.0"


def to_python(
    fits: Fits,
    path: Optional[Union[str, Path]] = None,
    *,
    variables: Variables = None,
) -> str:
    """Render fits as importable Python source, one function per fit."""
    lines = ['"""Polynomial fits generated by pwpfit.export.to_python."""', ""]
    for fit in _as_fits(fits):
        names = tuple(_identifier(n) for n in _rename(fit, variables))
        lines.append("")
        lines.append(f"def {_identifier(fit.name)}({', '.join(names)}):")
        if fit.is_piecewise:
            lines.append(f"    if {names[0]} <= {float(fit.split)!r}:")
            lines.append(f"        return {_python_polynomial(fit, 0, names)}")
            lines.append(f"    return {_python_polynomial(fit, 1, names)}")
        else:
            lines.append(f"    return {_python_polynomial(fit, 0, names)}")
        lines.append("")
    return _write("\n".join(lines), path)


def export(fits: Fits, path: Union[str, Path], **kwargs: Any) -> str:
    """Write fits to `path`, choosing the format by suffix (.tex or .py)."""
    suffix = Path(path).suffix.lower()
    if suffix == ".tex":
        return to_latex(fits, path, **kwargs)
    if suffix == ".py":
        return to_python(fits, path, **kwargs)
    raise ValueError(f"Cannot infer export format from suffix {suffix!r}; use .tex or .py.")
