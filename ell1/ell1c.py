# ell1/ell1c.py
"""ell1c – ell1 CLI

사용 예)
    $ python -m ell1.ell1c check tests/grammars/expr.g -D
    $ python -m ell1.ell1c sets  tests/grammars/expr.g -s ExprTail
    $ python -m ell1.ell1c first tests/grammars/expr.g Term ExprTail

기능
----
- check : 문법을 읽어 파이프라인(AST→BNF→ECFG→DIRECTOR) 검증 후 LL(1) 여부와 충돌 출력
- sets  : NULLABLE/FIRST/FOLLOW/DIRECTOR 표 출력
- first : 심볼 시퀀스의 FIRST 집합과 nullable 여부 출력

종료 코드: 0 = LL(1), 1 = LL(1) 아님(check), 2 = 문법/입력 오류
디버그 모드(-D/--debug)를 켜면 단계별 진행과 요약을 stderr로 출력합니다.
"""

from __future__ import annotations
import argparse
import sys
from typing import Iterable, Optional

from .errors import GrammarError

# ------------------------------
# 헬퍼
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _fmt_set(items: Iterable[str]) -> str:
    return "{" + ", ".join(sorted(items)) + "}"

# ------------------------------
# 파이프라인 로딩
# ------------------------------

def _load_pipeline(grammar_path: str, debug: bool):
    """.g 파일을 읽어 AST→BNF→ECFG(분석 포함)까지 생성."""
    from .grammar.loader import load_grammar_text
    from .grammar.parser import parse_grammar
    from .grammar.transform import to_bnf
    from .ecfg import ECFG

    src = load_grammar_text(grammar_path)
    g = parse_grammar(src)
    if debug: _eprint("[DEBUG] AST ready | rules=%d" % len(g.rules))

    bnf = to_bnf(g)
    if debug: _eprint("[DEBUG] BNF ready | terms=%d nonterms=%d rules=%d" %
                      (len(bnf.terms), len(bnf.nonterms), len(bnf.prods)))

    ecfg = ECFG.from_bnf(bnf)
    if debug: _eprint("[DEBUG] NULLABLE/FIRST/FOLLOW/DIRECTOR computed | start=%s" % ecfg.start_symbol)

    return g, bnf, ecfg


def _run(func, args) -> int:
    """공통 오류 처리: SyntaxError/GrammarError/OSError → 종료 코드 2"""
    try:
        return func(args)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except GrammarError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

# ------------------------------
# 디버그 출력 헬퍼
# ------------------------------

def _print_bnf_summary(bnf) -> None:
    _eprint("\n[BNF]")
    _eprint(f"Start: {bnf.start}")
    _eprint("Terminals:")
    _eprint("  " + ", ".join(bnf.terms))
    _eprint("Nonterminals:")
    _eprint("  " + ", ".join(bnf.nonterms))
    _eprint(f"Productions: {len(bnf.prods)}")
    for p in bnf.prods:
        _eprint(f"  {p}")


def _print_sets(ecfg, only: Optional[str] = None) -> None:
    nonterms = [only] if only else list(ecfg.non_terminals)
    for A in nonterms:
        ecfg.catalog.require_nonterm(A)

    print("[NULLABLE]")
    nullable = [A for A in nonterms if A in ecfg.nullable]
    print(", ".join(nullable) if nullable else "(none)")

    width = max(len(A) for A in nonterms) if nonterms else 0
    print("\n[FIRST(nonterminals)]")
    for A in nonterms:
        print(f"{A:>{width}} : {_fmt_set(ecfg.calculate_first_set([A]))}")

    print("\n[FOLLOW(nonterminals)]")
    for A in nonterms:
        print(f"{A:>{width}} : {_fmt_set(ecfg.calculate_follow_set(A))}")

    print("\n[DIRECTOR(alternatives)]")
    for A in nonterms:
        for alt, ds in ecfg.calculate_director_set(A).items():
            print(f"  {alt} : {_fmt_set(ds)}")

# ------------------------------
# 커맨드 구현
# ------------------------------

def cmd_check(args) -> int:
    g, bnf, ecfg = _load_pipeline(args.file, debug=args.debug)

    if args.debug:
        _print_bnf_summary(bnf)
        empty = [A for A in ecfg.non_terminals if not ecfg.productions_for(A)]
        if empty:
            _eprint("[WARN] Nonterminals without productions: " + ", ".join(empty))

    conflicts = ecfg.conflicts()
    verdict = "yes" if ecfg.is_ll1() else "no"
    print(f"[CHECK OK] ll1={verdict} nonterms={len(ecfg.non_terminals)} "
          f"prods={len(ecfg.productions)} conflicts={len(conflicts)}")
    if conflicts:
        print("\n[Conflicts Detail]")
        print(ecfg.pretty_conflicts())
        return 1
    return 0


def cmd_sets(args) -> int:
    g, bnf, ecfg = _load_pipeline(args.file, debug=args.debug)
    if args.debug:
        _print_bnf_summary(bnf)
    _print_sets(ecfg, args.symbol)
    return 0


def cmd_first(args) -> int:
    g, bnf, ecfg = _load_pipeline(args.file, debug=args.debug)
    first, nullable = ecfg.first_of_sequence(args.symbols)
    seq = " ".join(args.symbols) if args.symbols else "ε"
    print(f"FIRST({seq}) = {_fmt_set(first)}")
    print(f"nullable = {'yes' if nullable else 'no'}")
    return 0

# ------------------------------
# 엔트리포인트
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="ell1c", description="ell1 extended LL(1) grammar checker")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="문법이 LL(1)인지 검사하고 충돌을 보고합니다")
    p_check.add_argument("file", help=".g 문법 파일")
    p_check.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_check.set_defaults(func=cmd_check)

    p_sets = sub.add_parser("sets", help="NULLABLE/FIRST/FOLLOW/DIRECTOR 집합을 출력합니다")
    p_sets.add_argument("file", help=".g 문법 파일")
    p_sets.add_argument("-s", "--symbol", help="이 비단말만 출력")
    p_sets.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_sets.set_defaults(func=cmd_sets)

    p_first = sub.add_parser("first", help="심볼 시퀀스의 FIRST 집합을 출력합니다")
    p_first.add_argument("file", help=".g 문법 파일")
    p_first.add_argument("symbols", nargs="*", help="심볼 이름들(없으면 ε)")
    p_first.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_first.set_defaults(func=cmd_first)

    args = ap.parse_args(argv)
    return int(_run(args.func, args))

if __name__ == "__main__":
    sys.exit(main())
