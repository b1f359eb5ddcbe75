"""ell1 문법 DSL 파서
- %token NAME NAME ... ;  (단말로 취급할 이름 선언)
- %start NAME ;
- 규칙: RuleName : expr ;
- expr: seq ('|' seq)*   (빈 seq는 ε)
- atom: IDENT | "lit" | 'lit' | '(' expr ')'  뒤에 ?, *, + 수식자
- 세미콜론(;)은 모든 선언/규칙 종료에 **반드시 필요**

또한 프로그램 API용 확장 우변 표기(\\( \\) \\{ \\} \\[ \\] \\|)를
같은 AST(Expr)로 읽어들이는 parse_extended_rhs()를 제공합니다.
"""

from __future__ import annotations
import regex as re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from .ast import *
from ..errors import ExtendedNotationError
import ast as _pyast

# ---- Lexer 토큰 ----
_TOKEN_SPEC = [
    ("WS",       r"[ \t\f]+"),
    ("NEWLINE",  r"\n"),
    ("COMMENT",  r"//[^\n]*"),
    ("MCOMMENT", r"/\*.*?\*/"),
    ("PERCENT",  r"%"),
    ("COLON",    r":"),
    ("SEMI",     r";"),
    ("OR",       r"\|"),
    ("LPAREN",   r"\("),
    ("RPAREN",   r"\)"),
    ("QMARK",    r"\?"),
    ("STAR",     r"\*"),
    ("PLUS",     r"\+"),
    ("STRING",   r'"(?:\\.|[^"\\])*"'),
    ("SSTRING",  r"'(?:\\.|[^'\\])*'"),
    ("IDENT",    r"[\p{XID_Start}_][\p{XID_Continue}]*"),
]
MASTER_RE = re.compile("|".join(f"(?P<{n}>{p})" for n,p in _TOKEN_SPEC), re.S)

@dataclass
class Tok:
    kind: str
    lexeme: str
    start: int
    end: int
    line: int
    col: int

def _scan(src: str) -> List[Tok]:
    """개행은 줄/칼럼 갱신만 하고 토큰스트림에는 **넣지 않는다**."""
    toks: List[Tok] = []
    line = col = 1
    i = 0
    while i < len(src):
        m = MASTER_RE.match(src, i)
        if not m:
            raise SyntaxError(f"Unexpected char {src[i]!r} at {line}:{col}\n{_caret(src, i)}")
        kind = m.lastgroup or ""
        lex = m.group(0)
        start, end = i, m.end()
        nl_count = lex.count("\n")

        if kind not in ("WS", "COMMENT", "MCOMMENT", "NEWLINE"):
            toks.append(Tok(kind, lex, start, end, line, col))

        # 위치 갱신
        if nl_count:
            line += nl_count
            col = len(lex) - lex.rfind("\n")
        else:
            col += len(lex)
        i = end

    toks.append(Tok("EOF", "", len(src), len(src), line, col))
    return toks


# ---------- error handling utils ----------
def _caret(src: str, pos: int) -> str:
    """절대 위치 pos가 속한 줄과, 그 열을 가리키는 캐럿 두 줄."""
    start = src.rfind("\n", 0, pos) + 1
    end = src.find("\n", pos)
    if end == -1:
        end = len(src)
    return f"{src[start:end]}\n{' ' * (pos - start)}^"

# --- 토큰 스트림 ---
class _TS:
    def __init__(self, toks: List[Tok], src: str):
        self.toks = toks
        self.i = 0
        self.src = src

    def la(self) -> Tok:
        return self.toks[self.i]

    def fail(self, tok: Tok, msg: str) -> None:
        """tok 위치를 덧붙여 SyntaxError."""
        raise SyntaxError(f"{msg} at {tok.line}:{tok.col}\n{_caret(self.src, tok.start)}")

    def eat(self, kind: str) -> Tok:
        t = self.la()
        if t.kind != kind:
            self.fail(t, f"Expected {kind}, got {t.kind}")
        self.i += 1
        return t

    def match(self, kind: str) -> Optional[Tok]:
        if self.la().kind == kind:
            return self.eat(kind)
        return None

    def require_semi(self, context: str, example: str, anchor: Tok) -> None:
        """
        세미콜론 강제. 없으면 다음 토큰(또는 EOF)을 Found로 알리고,
        캐럿은 anchor(직전 토큰)의 '끝 위치'에 찍음 → 올바른 줄에 표시됨.
        """
        if self.match("SEMI"):
            return
        got = self.la()
        found = "EOF" if got.kind == "EOF" else got.kind
        raise SyntaxError(
            f"Missing ';' after {context} (semicolon is mandatory).\n"
            f"- Found: {found} at {got.line}:{got.col}\n"
            f"- Example: {example}\n\n"
            f"{_caret(self.src, anchor.end)}"
        )

def _unquote_string(s: str) -> str:
    # s는 따옴표를 포함한 토큰 원문. Python의 안전한 리터럴 파서로 정확히 복원.
    return _pyast.literal_eval(s)


# --- Grammar Parsing ---
def parse_grammar(src: str) -> GrammarDecl:
    ts = _TS(_scan(src), src)
    g = GrammarDecl()

    # 선언부
    while ts.la().kind == "PERCENT":
        ts.eat("PERCENT")
        look = ts.la()
        if look.kind != "IDENT":
            ts.fail(look, f"Expected directive name after '%', got {look.kind}")

        ident_tok = ts.eat("IDENT")
        if ident_tok.lexeme == "token":
            last = ts.eat("IDENT")
            g.decl_tokens.append(last.lexeme)
            while ts.la().kind == "IDENT":
                last = ts.eat("IDENT")
                g.decl_tokens.append(last.lexeme)
            ts.require_semi("%token declaration", "%token NUMBER IDENT;", anchor=last)
        elif ident_tok.lexeme == "start":
            start_tok = ts.eat("IDENT")
            g.start = start_tok.lexeme
            ts.require_semi("%start declaration", "%start StartSymbol;", anchor=start_tok)
        else:
            ts.fail(ident_tok, f"Unknown directive %{ident_tok.lexeme}")

    # 규칙부
    while ts.la().kind != "EOF":
        lhs_tok = ts.eat("IDENT")
        lhs = lhs_tok.lexeme
        colon = ts.eat("COLON")
        expr = _parse_expr(ts)
        last_tok = ts.toks[ts.i - 1] if ts.i > 0 else colon
        ts.require_semi(f"rule '{lhs}'", f"{lhs} : ... ;", anchor=last_tok)
        g.rules.append(Rule(lhs, expr, Span(lhs_tok.start, last_tok.end, lhs_tok.line, lhs_tok.col)))

    if not g.start and g.rules:
        g.start = g.rules[0].name

    return g

def _parse_expr(ts: _TS) -> Expr:
    alts = [_parse_seq(ts)]
    while ts.match("OR"):
        alts.append(_parse_seq(ts))
    return Expr(alts)

def _parse_seq(ts: _TS) -> Seq:
    """시퀀스: (IDENT | STRING | "(" expr ")")*  — 아무것도 없으면 ε"""
    items: List[Atom] = []
    while ts.la().kind in ("IDENT", "STRING", "SSTRING", "LPAREN"):
        items.append(_parse_atom(ts))
    return Seq(items)


def _parse_atom(ts: _TS) -> Atom:
    t = ts.la()
    span = Span(t.start, t.end, t.line, t.col)
    if t.kind == "IDENT":
        node = Name(ts.eat("IDENT").lexeme, span)
    elif t.kind in ("STRING", "SSTRING"):
        node = Lit(_unquote_string(ts.eat(t.kind).lexeme), span)
    elif t.kind == "LPAREN":
        ts.eat("LPAREN")
        node = Group(_parse_expr(ts), span)
        ts.eat("RPAREN")
    else:
        ts.fail(t, f"Unexpected token {t.kind}")

    # EBNF 수식자
    suf = Suffix.NONE
    if ts.match("QMARK"):
        suf = Suffix.OPT
    elif ts.match("STAR"):
        suf = Suffix.STAR
    elif ts.match("PLUS"):
        suf = Suffix.PLUS
    return Atom(node, suf, span)


# --- 확장 우변 표기 (프로그램 API) ---------------------------------------

META_ALT = "\\|"
# 여는 메타 토큰 → (닫는 메타 토큰, 적용할 수식자)
META_OPEN = {
    "\\(": ("\\)", Suffix.NONE),
    "\\{": ("\\}", Suffix.STAR),
    "\\[": ("\\]", Suffix.OPT),
}
META_CLOSE = {close for close, _ in META_OPEN.values()}
META_TOKENS = frozenset(META_OPEN) | META_CLOSE | {META_ALT}


def has_extended_notation(rhs: Sequence[str]) -> bool:
    return any(X in META_TOKENS for X in rhs)


def parse_extended_rhs(rhs: Sequence[str], lhs: Optional[str] = None) -> Expr:
    r"""
    심볼 이름 리스트 형태의 우변을 Expr로 읽습니다.
    - '\|'       : 대안 구분
    - '\(' '\)'  : 묶음
    - '\{' '\}'  : 0회 이상 반복
    - '\[' '\]'  : 생략 가능
    나머지 이름은 모두 Name 원자가 됩니다(단말/비단말 구분은 카탈로그가 담당).
    괄호 짝이 맞지 않으면 ExtendedNotationError.
    """
    # 스택 원소: (닫는 토큰, 수식자, 완료된 대안들, 현재 시퀀스)
    stack: List[Tuple[Optional[str], str, List[Seq], List[Atom]]] = [(None, Suffix.NONE, [], [])]
    for X in rhs:
        close, suffix, alts, items = stack[-1]
        if X == META_ALT:
            alts.append(Seq(items))
            stack[-1] = (close, suffix, alts, [])
        elif X in META_OPEN:
            new_close, new_suffix = META_OPEN[X]
            stack.append((new_close, new_suffix, [], []))
        elif X in META_CLOSE:
            if X != close:
                raise ExtendedNotationError(
                    f"Unbalanced {X!r} in right-hand side of {lhs!r}", X, lhs)
            stack.pop()
            alts.append(Seq(items))
            stack[-1][3].append(Atom(Group(Expr(alts)), suffix))
        else:
            items.append(Atom(Name(X)))

    close, _, alts, items = stack[-1]
    if len(stack) > 1:
        raise ExtendedNotationError(
            f"Missing {close!r} in right-hand side of {lhs!r}", close, lhs)
    alts.append(Seq(items))
    return Expr(alts)
