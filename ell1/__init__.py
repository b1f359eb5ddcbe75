# ell1/__init__.py
"""Extended LL(1) grammar analysis.

This package provides:
- Symbol catalog / production table with construction-time validation
- Fixed-point NULLABLE, FIRST and FOLLOW analyses
- Per-alternative director sets and the LL(1) decision procedure
- Lowering of extended notation (groups, alternation, repetition, optional)
- A small `.g` grammar language and the `ell1c` command line tool
"""

from .analysis.symbols import EOF, Alternative, Production, Symbol, SymbolKind
from .analysis.director import LL1Conflict
from .ecfg import (
    ECFG, construct, is_ll1, is_nullable, first_set, follow_set, director_sets,
)
from .errors import (
    GrammarError, UndeclaredSymbol, AmbiguousSymbolKind, UnknownLhs,
    InvalidStartSymbol, UnknownSymbol, ReservedSymbol, ExtendedNotationError,
)
