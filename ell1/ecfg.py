# ell1/ecfg.py
"""ECFG — 한 번 구성하고 읽기 전용으로 조회하는 문법 분석기.

구성 시점에 모든 검증과 NULLABLE/FIRST/FOLLOW/DIRECTOR 계산을 끝내고
결과를 불변 테이블로 보관합니다. 이후의 조회는 모두 순수 함수이며
카탈로그에 없는 이름을 받았을 때만 UnknownSymbol을 던집니다.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Sequence, Set, Tuple, Union

from .analysis.director import DirectorTables, LL1Conflict, build_director_tables
from .analysis.first_follow import FFResult, compute_nullable_first_follow
from .analysis.symbols import Alternative, Production, ProductionTable, SymbolCatalog
from .grammar.ast import Expr, Group, Suffix
from .grammar.parser import META_TOKENS, parse_extended_rhs
from .grammar.transform import BNF, lower_extended

Symbols = Union[str, Sequence[str]]
ProductionSpec = Union[Production, Tuple[str, Sequence[str]]]


def _as_seq(symbols: Symbols) -> Tuple[str, ...]:
    # 문자열 하나는 심볼 하나로 취급
    if isinstance(symbols, str):
        return (symbols,)
    return tuple(symbols)


def _first_of_expr(expr: Expr, ff: FFResult) -> Tuple[FrozenSet[str], bool]:
    """
    확장 표기 Expr의 (FIRST, nullable). 보조 비단말을 만들지 않고 구조를 그대로 따라갑니다.
    - 대안: FIRST 합집합, 하나라도 nullable이면 nullable
    - 시퀀스: 왼쪽부터 누적, nullable이 아닌 첫 원자에서 멈춤
    - \\{ \\} / \\[ \\] 로 감싼 원자는 항상 nullable
    """
    out: Set[str] = set()
    nullable = False
    for seq in expr.alts:
        f_seq, seq_nullable = _first_of_atoms(seq.items, ff)
        out |= f_seq
        nullable = nullable or seq_nullable
    return frozenset(out), nullable


def _first_of_atoms(items, ff: FFResult) -> Tuple[FrozenSet[str], bool]:
    out: Set[str] = set()
    for atom in items:
        if isinstance(atom.node, Group):
            f_atom, atom_nullable = _first_of_expr(atom.node.expr, ff)
        else:
            X = atom.node.ident
            f_atom, atom_nullable = ff.first[X], X in ff.nullable
        out |= f_atom
        if not (atom_nullable or atom.suffix in (Suffix.OPT, Suffix.STAR)):
            return frozenset(out), False
    return frozenset(out), True


class ECFG:
    """
    ECFG
    ====
    단말/비단말 목록, 프로덕션 목록, 시작 기호로 구성되는 (확장) 문맥 자유 문법.

    - productions: Production 또는 (lhs, rhs) 쌍의 시퀀스. rhs가 비어 있으면 ε.
    - rhs에 확장 표기(\\| \\( \\) \\{ \\} \\[ \\])가 있으면 검증 전에 BNF로 전개하며,
      이때 생긴 보조 비단말(__grpN/__repN/__optN)도 카탈로그에 포함됩니다.

    검증 실패 시 errors 모듈의 GrammarError 하위 예외를 던집니다.
    """

    def __init__(self, terminals: Iterable[str], non_terminals: Iterable[str],
                 productions: Iterable[ProductionSpec], start_symbol: str,
                 *, extended: bool = True):
        terminals = list(terminals)
        non_terminals = list(non_terminals)
        pairs: List[Tuple[str, Tuple[str, ...]]] = []
        for p in productions:
            lhs, rhs = (p.lhs, p.rhs) if isinstance(p, Production) else p
            pairs.append((lhs, tuple(rhs)))

        if extended:
            prods, aux = lower_extended(pairs, taken=terminals + non_terminals)
        else:
            prods, aux = [Production(lhs, rhs) for lhs, rhs in pairs], []

        self._catalog = SymbolCatalog()
        self._catalog.freeze(terminals, non_terminals + aux, start_symbol)
        self._table = ProductionTable(self._catalog, prods)
        self._ff: FFResult = compute_nullable_first_follow(self._table)
        self._director: DirectorTables = build_director_tables(self._table, self._ff)

    # ----- 대체 생성자 -----
    @classmethod
    def from_bnf(cls, bnf: BNF) -> "ECFG":
        """이미 전개된 BNF. 우변의 \\| 같은 이름도 그대로 심볼로 둡니다."""
        return cls(bnf.terms, bnf.nonterms, bnf.prods, bnf.start, extended=False)

    @classmethod
    def from_source(cls, src: str) -> "ECFG":
        """DSL 원문 → ECFG. 문법 오류는 SyntaxError."""
        from .grammar.parser import parse_grammar
        from .grammar.transform import to_bnf
        return cls.from_bnf(to_bnf(parse_grammar(src)))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ECFG":
        from .grammar.loader import load_grammar_text
        return cls.from_source(load_grammar_text(path))

    # ----- 구조 -----
    @property
    def catalog(self) -> SymbolCatalog:
        return self._catalog

    @property
    def terminals(self) -> Tuple[str, ...]:
        return self._catalog.terms

    @property
    def non_terminals(self) -> Tuple[str, ...]:
        return self._catalog.nonterms

    @property
    def start_symbol(self) -> str:
        return self._catalog.start

    @property
    def productions(self) -> Tuple[Production, ...]:
        return self._table.prods

    @property
    def nullable(self) -> FrozenSet[str]:
        """nullable 비단말 전체."""
        return self._ff.nullable

    def productions_for(self, non_terminal: str) -> Tuple[Tuple[str, ...], ...]:
        return self._table.productions_for(non_terminal)

    def alternatives(self, non_terminal: str) -> Tuple[Alternative, ...]:
        return self._table.alternatives(non_terminal)

    # ----- 분석 조회 -----
    def is_nullable(self, symbols: Symbols) -> bool:
        return self.first_of_sequence(symbols)[1]

    calculate_nullable = is_nullable

    def first_of_sequence(self, symbols: Symbols) -> Tuple[FrozenSet[str], bool]:
        """
        (FIRST(seq), seq가 nullable인지)
        선언되지 않은 메타 토큰(\\{ 등)이 있으면 seq를 확장 표기로 읽습니다.
        """
        seq = _as_seq(symbols)
        if any(X in META_TOKENS and X not in self._catalog for X in seq):
            expr = parse_extended_rhs(seq)
            self._catalog.require_all([X for X in seq if X not in META_TOKENS])
            return _first_of_expr(expr, self._ff)
        return self._ff.first_of_sequence(self._catalog.require_all(seq))

    def calculate_first_set(self, symbols: Symbols) -> FrozenSet[str]:
        return self.first_of_sequence(symbols)[0]

    def calculate_follow_set(self, non_terminal: str) -> FrozenSet[str]:
        return self._ff.follow[self._catalog.require_nonterm(non_terminal)]

    def calculate_director_set(self, non_terminal: str) -> Dict[Alternative, FrozenSet[str]]:
        """대안 → 디렉터 집합 (대안 선언 순서)."""
        return dict(self._director.director[self._catalog.require_nonterm(non_terminal)])

    def conflicts(self) -> Tuple[LL1Conflict, ...]:
        return self._director.conflicts

    def pretty_conflicts(self) -> str:
        return self._director.pretty_conflicts()

    def is_ll1(self) -> bool:
        return self._director.is_ll1

    is_ell1 = is_ll1

    def __repr__(self) -> str:
        return (f"ECFG(terms={list(self.terminals)}, nonterms={list(self.non_terminals)}, "
                f"prods={len(self._table)}, start={self.start_symbol})")


# ------------------------------
# 함수형 인터페이스
# ------------------------------

def construct(terminals: Iterable[str], non_terminals: Iterable[str],
              productions: Iterable[ProductionSpec], start_symbol: str) -> ECFG:
    return ECFG(terminals, non_terminals, productions, start_symbol)


def is_ll1(grammar: ECFG) -> bool:
    return grammar.is_ll1()


def is_nullable(grammar: ECFG, symbols: Symbols) -> bool:
    return grammar.is_nullable(symbols)


def first_set(grammar: ECFG, symbols: Symbols) -> FrozenSet[str]:
    return grammar.calculate_first_set(symbols)


def follow_set(grammar: ECFG, non_terminal: str) -> FrozenSet[str]:
    return grammar.calculate_follow_set(non_terminal)


def director_sets(grammar: ECFG, non_terminal: str) -> Dict[Alternative, FrozenSet[str]]:
    return grammar.calculate_director_set(non_terminal)
