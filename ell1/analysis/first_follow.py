from __future__ import annotations
from typing import Dict, FrozenSet, Mapping, Set, Sequence, Tuple
from dataclasses import dataclass
from types import MappingProxyType
from .symbols import EOF, ProductionTable


@dataclass(frozen=True)
class FFResult:
    """
    FFResult
    ========
    FIRST/FOLLOW/NULLABLE 계산 결과를 담는 불변 컨테이너입니다.

    - nullable: ε-생산 가능한 비단말 집합 (이름 기반)
    - first: 각 **심볼 이름** → FIRST 집합(단말 이름들의 집합)
      * 비단말 A: FIRST(A)
      * 단말 a: FIRST(a) = { a }
    - follow: 각 **비단말 이름** → FOLLOW 집합(단말 이름들의 집합)
      * 시작 기호 S 에는 항상 '$'가 포함됩니다.
    first/follow는 읽기 전용 매핑(MappingProxyType)으로 보관됩니다.
    """
    nullable: FrozenSet[str]
    first: Mapping[str, FrozenSet[str]]
    follow: Mapping[str, FrozenSet[str]]

    def first_of_sequence(self, seq: Sequence[str]) -> Tuple[FrozenSet[str], bool]:
        """
        심볼 시퀀스 seq의 FIRST 집합과 'seq 자체가 nullable인지' 여부.
        seq의 심볼은 이미 검증되었다고 가정합니다.
        """
        return first_of_sequence(seq, self.first, self.nullable)


def first_of_sequence(seq: Sequence[str], first, nullable) -> Tuple[FrozenSet[str], bool]:
    """
    왼쪽부터 훑으며 FIRST(X)를 누적하고, nullable이 아닌 첫 심볼에서 멈춥니다.
    전부 nullable(빈 시퀀스 포함)이면 두 번째 값이 True 입니다.
    단말은 nullable에 들어있지 않으므로 자연스럽게 거기서 멈춥니다.
    """
    out: Set[str] = set()
    for X in seq:
        out |= first[X]
        if X not in nullable:
            return frozenset(out), False
    return frozenset(out), True


def compute_nullable(table: ProductionTable) -> FrozenSet[str]:
    """
    NULLABLE 고정점
    - ε-프로덕션(A -> ε)이 있으면 A를 nullable에 추가
    - A -> X1 X2 ... Xn 에서 모든 Xi가 nullable이면 A도 nullable
    - 더 이상 변화가 없을 때까지 반복
    """
    nullable: Set[str] = set()
    changed = True
    while changed:
        changed = False
        for p in table:
            if p.lhs in nullable:
                continue
            # 빈 우변이면 all()이 True → ε-프로덕션
            if all(X in nullable for X in p.rhs):
                nullable.add(p.lhs)
                changed = True
    return frozenset(nullable)


def compute_first(table: ProductionTable, nullable: FrozenSet[str]) -> Dict[str, FrozenSet[str]]:
    """
    FIRST 고정점
    - 단말 a: FIRST(a) = { a }
    - 비단말 A: 모든 프로덕션 A -> α 에 대해 FIRST(α)를 합집합
    각 라운드는 집합을 키우기만 하므로 단말 수로 상한이 정해집니다.
    """
    catalog = table.catalog
    first: Dict[str, Set[str]] = {t: {t} for t in catalog.terms}
    for A in catalog.nonterms:
        first[A] = set()

    changed = True
    while changed:
        changed = False
        for p in table:
            f_alpha, _ = first_of_sequence(p.rhs, first, nullable)
            before = len(first[p.lhs])
            first[p.lhs] |= f_alpha
            if len(first[p.lhs]) != before:
                changed = True

    return {X: frozenset(s) for X, s in first.items()}


def compute_follow(table: ProductionTable, nullable: FrozenSet[str],
                   first: Dict[str, FrozenSet[str]]) -> Dict[str, FrozenSet[str]]:
    """
    FOLLOW 고정점
    - FOLLOW(start) 에 '$' 추가
    - 모든 프로덕션 A -> X1 X2 ... Xn 에 대해, 오른쪽에서 왼쪽으로 훑으며
        - trailer := FOLLOW(A)로 시작
        - Xi가 비단말이면 FOLLOW(Xi)에 trailer를 더함
        - 이후 trailer := FIRST(Xi) ∪ (Xi가 nullable이면 trailer 포함)
      변화가 없을 때까지 반복
    """
    catalog = table.catalog
    follow: Dict[str, Set[str]] = {A: set() for A in catalog.nonterms}
    follow[catalog.start].add(EOF)

    changed = True
    while changed:
        changed = False
        for p in table:
            trailer: Set[str] = set(follow[p.lhs])  # 오른쪽에서 왼쪽으로 전파될 집합
            for X in reversed(p.rhs):
                if catalog.is_nonterm(X):
                    before = len(follow[X])
                    follow[X] |= trailer
                    if len(follow[X]) != before:
                        changed = True
                    trailer = set(first[X]) | (trailer if X in nullable else set())
                else:
                    trailer = {X}

    return {A: frozenset(s) for A, s in follow.items()}


def compute_nullable_first_follow(table: ProductionTable) -> FFResult:
    """
    compute_nullable_first_follow
    =============================
    프로덕션 테이블에 대해 NULLABLE → FIRST → FOLLOW 순으로 고정점을 계산합니다.
    재귀(좌재귀 포함) 문법에서도 재귀 호출 없이 반복만으로 종료합니다.
    반환 값은 **모두 이름 기반**(문자열)입니다.
    """
    nullable = compute_nullable(table)
    first = compute_first(table, nullable)
    follow = compute_follow(table, nullable, first)
    return FFResult(nullable=nullable,
                    first=MappingProxyType(first),
                    follow=MappingProxyType(follow))
