# ell1/grammar/ast.py
"""Grammar AST
- %token NAME ... : 단말로 취급할 이름들
- %start NAME     : 시작 기호
- Expr/Seq/Atom: EBNF 표현을 그대로 보존((...), ?, *, + 포함)
"""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import List, Optional, Union

@dataclass
class Span:
    start: int
    end: int
    line: int
    col: int

class Suffix:
    NONE = "none"
    OPT  = "opt"
    STAR = "star"
    PLUS = "plus"

@dataclass
class Name:
    ident: str
    span: Optional[Span] = None

@dataclass
class Lit:
    text: str
    span: Optional[Span] = None

@dataclass
class Group:
    expr: "Expr"
    span: Optional[Span] = None


AtomKind = Union[Name, Lit, Group]

# EBNF 표현 구조

@dataclass
class Atom:
    node: AtomKind
    suffix: str = Suffix.NONE
    span: Optional[Span] = None

@dataclass
class Seq:
    """대안(alt) 하나의 시퀀스. 빈 items는 ε."""
    items: List[Atom]

@dataclass
class Expr:
    alts: List[Seq]

@dataclass
class Rule:
    name: str
    expr: Expr
    span: Optional[Span] = None

@dataclass
class GrammarDecl:
    # 선언(Decl) 섹션
    decl_tokens: List[str] = field(default_factory=list)

    # 규칙 섹션
    rules: List[Rule] = field(default_factory=list)
    start: Optional[str] = None
