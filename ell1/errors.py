# ell1/errors.py
"""문법 구성/조회 시 발생하는 예외 계층.

- 구성(construct) 단계: UndeclaredSymbol, AmbiguousSymbolKind, UnknownLhs,
  InvalidStartSymbol, ReservedSymbol, ExtendedNotationError
- 조회(query) 단계: UnknownSymbol 만 발생
"""

from __future__ import annotations
from typing     import Optional


class GrammarError(Exception):
    """모든 문법 오류의 기반 클래스. `symbol`에 문제가 된 이름을 담습니다."""

    def __init__(self, msg: str, symbol: Optional[str] = None):
        self.symbol = symbol
        super().__init__(msg)


class UndeclaredSymbol(GrammarError):
    """프로덕션 우변이 선언되지 않은 심볼을 참조함."""


class AmbiguousSymbolKind(GrammarError):
    """같은 이름이 단말/비단말 양쪽에 선언됨."""


class UnknownLhs(GrammarError):
    """프로덕션 좌변이 선언된 비단말이 아님."""


class InvalidStartSymbol(GrammarError):
    """시작 기호가 선언된 비단말이 아님."""


class UnknownSymbol(GrammarError):
    """구성 이후 조회에서 카탈로그에 없는 이름을 사용함."""


class ReservedSymbol(GrammarError):
    """EOF 표식('$')처럼 예약된 이름을 선언함."""


class ExtendedNotationError(GrammarError):
    r"""확장 표기(\( \) \{ \} \[ \] \|)의 괄호 짝이 맞지 않음."""

    def __init__(self, msg: str, symbol: Optional[str] = None, lhs: Optional[str] = None):
        self.lhs = lhs
        super().__init__(msg, symbol)
