# director.py
"""디렉터 집합(대안별 선견 집합)과 LL(1) 판정."""
from __future__ import annotations
from dataclasses import dataclass
from itertools import combinations
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Tuple

from .first_follow import FFResult
from .symbols import Alternative, ProductionTable


@dataclass(frozen=True)
class LL1Conflict:
    """같은 좌변의 두 대안이 공유하는 선견 단말들."""
    lhs: str
    first: Alternative
    second: Alternative
    overlap: FrozenSet[str]

    def __str__(self) -> str:
        la = ", ".join(sorted(self.overlap))
        return f"{self.lhs}: [{self.first}] / [{self.second}] on {{{la}}}"


@dataclass(frozen=True)
class DirectorTables:
    """
    DirectorTables
    ==============
    비단말마다 대안(Alternative) → 디렉터 집합을 담는 컨테이너.

    필드
    ----
    - director : 비단말 A → (Alternative → frozenset(단말)) 매핑, 대안은 선언 순서
    - conflicts: 디렉터 집합이 겹치는 대안 쌍 목록(비단말 선언 순서, 쌍은 대안 순서)

    계산 규칙
    --------
    Director(A → α) = FIRST(α)              (α가 nullable이 아닐 때)
    Director(A → α) = FIRST(α) ∪ FOLLOW(A)  (α가 nullable일 때, ε 포함)
    """
    director: Mapping[str, Mapping[Alternative, FrozenSet[str]]]
    conflicts: Tuple[LL1Conflict, ...]

    @property
    def is_ll1(self) -> bool:
        return not self.conflicts

    def pretty_conflicts(self) -> str:
        """충돌 목록을 사람이 읽기 좋은 문자열로. 충돌이 없으면 '(no conflicts)'."""
        if not self.conflicts:
            return "(no conflicts)"
        return "\n".join(str(c) for c in self.conflicts)


def director_set(alt: Alternative, ff: FFResult) -> FrozenSet[str]:
    f_alpha, alpha_nullable = ff.first_of_sequence(alt.rhs)
    if alpha_nullable:
        return f_alpha | ff.follow[alt.lhs]
    return f_alpha


def find_conflicts(lhs: str, sets: Dict[Alternative, FrozenSet[str]]) -> List[LL1Conflict]:
    out: List[LL1Conflict] = []
    for (a, da), (b, db) in combinations(sets.items(), 2):
        overlap = da & db
        if overlap:
            out.append(LL1Conflict(lhs, a, b, overlap))
    return out


def build_director_tables(table: ProductionTable, ff: FFResult) -> DirectorTables:
    """모든 비단말의 디렉터 집합과 대안 쌍별 충돌을 계산합니다."""
    director: Dict[str, Mapping[Alternative, FrozenSet[str]]] = {}
    conflicts: List[LL1Conflict] = []
    for A in table.catalog.nonterms:
        sets = {alt: director_set(alt, ff) for alt in table.alternatives(A)}
        director[A] = MappingProxyType(sets)
        conflicts.extend(find_conflicts(A, sets))
    return DirectorTables(director=MappingProxyType(director), conflicts=tuple(conflicts))
