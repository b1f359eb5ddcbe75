"""심볼 카탈로그와 프로덕션 테이블 — 문법의 정적 구조를 보관하고 검증합니다."""
from __future__     import annotations
from dataclasses    import dataclass, field
from types          import MappingProxyType
from typing         import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..errors import (
    AmbiguousSymbolKind, InvalidStartSymbol, ReservedSymbol,
    UndeclaredSymbol, UnknownLhs, UnknownSymbol,
)

EOF = "$"


class SymbolKind:
    TERMINAL    = "terminal"
    NONTERMINAL = "nonterminal"


@dataclass(frozen=True)
class Symbol:
    name: str
    kind: str

    @property
    def is_terminal(self) -> bool:
        return self.kind == SymbolKind.TERMINAL

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Production:
    """
    BNF 프로덕션 1개.
    - lhs: 좌변 비단말 이름
    - rhs: 우변 심볼 이름 튜플(ε는 빈 튜플)
    """
    lhs: str
    rhs: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"{self.lhs} -> {' '.join(self.rhs) if self.rhs else 'ε'}"


@dataclass(frozen=True)
class Alternative:
    """비단말 `lhs`의 `index`번째 대안(선언 순서, 0부터)."""
    lhs: str
    index: int
    rhs: Tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.lhs}#{self.index} -> {' '.join(self.rhs) if self.rhs else 'ε'}"


def _dedupe(names: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for nm in names:
        if nm not in seen:
            seen.add(nm)
            out.append(nm)
    return out


@dataclass
class SymbolCatalog:
    """
    SymbolCatalog
    =============
    단말/비단말 **이름 → Symbol** 매핑과 시작 기호를 관리하는 카탈로그입니다.
    모든 분석 단계(NULLABLE/FIRST/FOLLOW/DIRECTOR)는 이 카탈로그를 기준으로
    심볼을 검증합니다.

    설계 원칙
    --------
    - 단말과 비단말은 **서로소**여야 합니다. (겹치면 AmbiguousSymbolKind)
    - EOF('$')는 예약어로, 카탈로그에 선언할 수 없습니다.
      FOLLOW 집합에서만 등장합니다.
    - freeze() 이후에는 매핑이 **불변**입니다.
    - 선언 순서를 유지합니다(중복은 첫 등장 위치만 남김).
    """

    _by_name: Mapping[str, Symbol] = field(default_factory=dict)
    _terms: Tuple[str, ...] = ()
    _nonterms: Tuple[str, ...] = ()
    _start: Optional[str] = None
    _frozen: bool = False

    def freeze(self, terms: Iterable[str], nonterms: Iterable[str], start: str) -> None:
        """
        단말/비단말 집합과 시작 기호로 카탈로그를 확정합니다.
        검증 순서: 종류 중복 → 예약어 → 시작 기호.
        """
        if self._frozen:
            return

        term_names = _dedupe(terms)
        nonterm_names = _dedupe(nonterms)

        both = set(term_names) & set(nonterm_names)
        if both:
            name = next(nm for nm in term_names if nm in both)
            raise AmbiguousSymbolKind(
                f"Symbol {name!r} is declared both as a terminal and a nonterminal", name)

        for nm in term_names + nonterm_names:
            if nm == EOF:
                raise ReservedSymbol(f"Symbol {EOF!r} is reserved for end of input", nm)

        if start not in nonterm_names:
            raise InvalidStartSymbol(f"Start symbol {start!r} is not a declared nonterminal", start)

        by_name = {nm: Symbol(nm, SymbolKind.TERMINAL) for nm in term_names}
        by_name.update((nm, Symbol(nm, SymbolKind.NONTERMINAL)) for nm in nonterm_names)
        self._by_name = MappingProxyType(by_name)
        self._terms = tuple(term_names)
        self._nonterms = tuple(nonterm_names)
        self._start = start
        self._frozen = True

    # ----- 조회 / 유틸 -----
    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def symbol(self, name: str) -> Symbol:
        """이름으로 Symbol을 찾습니다. 없으면 UnknownSymbol."""
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownSymbol(f"Unknown symbol {name!r}", name) from None

    def is_term(self, name: str) -> bool:
        sym = self._by_name.get(name)
        return sym is not None and sym.is_terminal

    def is_nonterm(self, name: str) -> bool:
        sym = self._by_name.get(name)
        return sym is not None and not sym.is_terminal

    def require_nonterm(self, name: str) -> str:
        """선언된 비단말이 아니면 UnknownSymbol."""
        if not self.is_nonterm(name):
            raise UnknownSymbol(f"Unknown nonterminal {name!r}", name)
        return name

    def require_all(self, names: Sequence[str]) -> Tuple[str, ...]:
        """시퀀스의 모든 이름이 선언돼 있는지 확인하고 튜플로 돌려줍니다."""
        for nm in names:
            self.symbol(nm)
        return tuple(names)

    @property
    def terms(self) -> Tuple[str, ...]:
        return self._terms

    @property
    def nonterms(self) -> Tuple[str, ...]:
        return self._nonterms

    @property
    def start(self) -> str:
        return self._start

    @property
    def by_name(self) -> Mapping[str, Symbol]:
        """이름 → Symbol 읽기 전용 매핑."""
        return self._by_name

    def __repr__(self) -> str:
        return f"SymbolCatalog(terms={list(self._terms)}, nonterms={list(self._nonterms)}, start={self._start})"


class ProductionTable:
    """
    선언 순서를 유지하는 프로덕션 목록. 좌변별 대안 묶음을 함께 보관합니다.
    구성 시 모든 좌변/우변 심볼을 카탈로그 기준으로 검증합니다.
    """

    def __init__(self, catalog: SymbolCatalog, prods: Iterable[Production]):
        self.catalog = catalog
        self.prods: Tuple[Production, ...] = tuple(prods)
        by_lhs: Dict[str, List[Tuple[str, ...]]] = {A: [] for A in catalog.nonterms}

        for p in self.prods:
            if not catalog.is_nonterm(p.lhs):
                raise UnknownLhs(f"Production {p} has an undeclared left-hand side {p.lhs!r}", p.lhs)
            for X in p.rhs:
                if X not in catalog:
                    raise UndeclaredSymbol(f"Production {p} references undeclared symbol {X!r}", X)
            by_lhs[p.lhs].append(p.rhs)

        self._by_lhs: Dict[str, Tuple[Tuple[str, ...], ...]] = {
            A: tuple(alts) for A, alts in by_lhs.items()
        }

    def __iter__(self):
        return iter(self.prods)

    def __len__(self) -> int:
        return len(self.prods)

    def productions_for(self, A: str) -> Tuple[Tuple[str, ...], ...]:
        """비단말 A의 우변 대안들(선언 순서). 선언되지 않은 비단말이면 UnknownSymbol."""
        self.catalog.require_nonterm(A)
        return self._by_lhs[A]

    def alternatives(self, A: str) -> Tuple[Alternative, ...]:
        return tuple(Alternative(A, i, rhs) for i, rhs in enumerate(self.productions_for(A)))
