# ell1/grammar/transform.py
"""EBNF/확장 표기((...), ?, *, +, \\{ \\} 등)를 BNF로 변환하고 Production 리스트로 리턴"""

from __future__     import annotations
from dataclasses    import dataclass
from typing         import Iterable, List, Sequence, Set, Tuple
from .ast           import *
from .parser        import has_extended_notation, parse_extended_rhs
from ..analysis.symbols import Production


@dataclass
class BNF:
    start: str
    prods: List[Production]
    terms: List[str]
    nonterms: List[str]


class _Lowering:
    """
    Expr(대안/묶음/수식자)를 평탄한 Production 목록으로 전개합니다.
    - 최상위 대안 하나 → 프로덕션 하나
    - 묶음        → 새 비단말 __grpN (안쪽 대안마다 프로덕션)
    - X?          → __optN -> ε | X
    - X*          → __repN -> ε | X __repN   (우측 재귀)
    - X+          → X __repN
    새 이름은 taken(이미 쓰인 이름)과 겹치지 않게 번호를 올려 고릅니다.
    """

    def __init__(self, taken: Iterable[str] = ()):
        self.prods: List[Production] = []
        self.terms: Set[str] = set()
        self.new_nonterms: List[str] = []
        self.taken: Set[str] = set(taken)
        self._grp_id = 0
        self._rep_id = 0
        self._opt_id = 0

    def _fresh(self, prefix: str, n: int) -> Tuple[str, int]:
        while True:
            n += 1
            name = f"__{prefix}{n}"
            if name not in self.taken:
                self.taken.add(name)
                self.new_nonterms.append(name)
                return name, n

    # 새 비단말 이름
    def _new_grp(self) -> str:
        name, self._grp_id = self._fresh("grp", self._grp_id)
        return name

    def _new_rep(self) -> str:
        name, self._rep_id = self._fresh("rep", self._rep_id)
        return name

    def _new_opt(self) -> str:
        name, self._opt_id = self._fresh("opt", self._opt_id)
        return name

    def _syms_from_atom_base(self, atom: Atom) -> List[str]:
        node = atom.node
        if isinstance(node, Name):
            return [node.ident]
        elif isinstance(node, Lit):
            self.terms.add(node.text)
            return [node.text]
        elif isinstance(node, Group):
            # 대안이 하나뿐인 묶음은 새 비단말 없이 그대로 펼칩니다.
            if len(node.expr.alts) == 1:
                return self._lower_seq_atoms(node.expr.alts[0].items)
            grp_name = self._new_grp()
            self.lower_expr_into(grp_name, node.expr)
            return [grp_name]
        else:
            raise TypeError("unknown Atom.node")

    def _lower_seq_atoms(self, atoms: List[Atom]) -> List[str]:
        """시퀀스 내 원자들을 전개하여 RHS 심볼 리스트로 반환."""
        rhs: List[str] = []
        for a in atoms:
            base_syms = self._syms_from_atom_base(a)
            if a.suffix == Suffix.NONE:
                rhs.extend(base_syms)
            elif a.suffix == Suffix.OPT:
                opt = self._new_opt()
                # opt -> ε | base
                self.prods.append(Production(opt, ()))
                self.prods.append(Production(opt, tuple(base_syms)))
                rhs.append(opt)
            elif a.suffix == Suffix.STAR:
                rep = self._new_rep()
                # rep -> ε | base rep
                self.prods.append(Production(rep, ()))
                self.prods.append(Production(rep, tuple(base_syms + [rep])))
                rhs.append(rep)
            elif a.suffix == Suffix.PLUS:
                rep = self._new_rep()
                self.prods.append(Production(rep, ()))
                self.prods.append(Production(rep, tuple(base_syms + [rep])))
                # PLUS는 최소 1회: base + rep
                rhs.extend(base_syms)
                rhs.append(rep)
            else:
                raise ValueError(f"unknown suffix: {a.suffix}")
        return rhs

    def lower_expr_into(self, lhs: str, expr: Expr) -> None:
        # 각 대안(Seq)을 하나의 프로덕션으로
        for seq in expr.alts:
            rhs = self._lower_seq_atoms(seq.items)
            self.prods.append(Production(lhs, tuple(rhs)))


def lower_extended(productions: Sequence[Tuple[str, Sequence[str]]],
                   taken: Iterable[str]) -> Tuple[List[Production], List[str]]:
    r"""
    (lhs, rhs) 목록에서 확장 표기(\| \( \) \{ \} \[ \])가 들어있는 우변만 전개합니다.
    표기가 없는 우변은 그대로 둡니다. 선언 순서는 유지되며, 전개 중 생긴
    보조 프로덕션은 원래 프로덕션 바로 뒤에 붙습니다.

    반환: (프로덕션 목록, 새로 만든 보조 비단말 이름들)
    """
    low = _Lowering(taken)
    for lhs, rhs in productions:
        if has_extended_notation(rhs):
            expr = parse_extended_rhs(rhs, lhs)
            start = len(low.prods)
            low.lower_expr_into(lhs, expr)
            # lower_expr_into는 보조 프로덕션을 먼저 쌓으므로 원래 좌변 것을 앞으로
            tail = low.prods[start:]
            low.prods[start:] = [p for p in tail if p.lhs == lhs] + [p for p in tail if p.lhs != lhs]
        else:
            low.prods.append(Production(lhs, tuple(rhs)))
    return low.prods, low.new_nonterms


def to_bnf(g: GrammarDecl) -> BNF:
    """GrammarDecl(AST) → BNF(프로덕션 목록, 단말/비단말 목록)"""
    rule_names = [r.name for r in g.rules]
    taken = set(rule_names) | set(g.decl_tokens)
    low = _Lowering(taken)
    for r in g.rules:
        low.lower_expr_into(r.name, r.expr)

    nonterms: List[str] = []
    for nm in rule_names + low.new_nonterms:
        if nm not in nonterms:
            nonterms.append(nm)

    # 단말: %token 선언 + 리터럴 + 어떤 규칙의 좌변도 아닌 이름
    terms: List[str] = list(dict.fromkeys(g.decl_tokens))
    nonterm_set = set(nonterms)
    for p in low.prods:
        for X in p.rhs:
            if (X in low.terms or X not in nonterm_set) and X not in terms:
                terms.append(X)

    start = g.start or (rule_names[0] if rule_names else "Start")
    return BNF(start=start, prods=low.prods, terms=terms, nonterms=nonterms)
