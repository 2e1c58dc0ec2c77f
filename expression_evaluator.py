# expression_evaluator.py
# Python 3.x
# PEP 8 준수, 문자열은 기본적으로 ' ' 사용
#
#            +------------+     +--------------+     +----------------+     +-----------------+
# [입력] >>> | tokenize() | >>> | to_postfix() | >>> | eval_postfix() | >>> | format_result() | >>> [결과]
#         |  +------------+  |  +--------------+  |  +----------------+  |  +-----------------+  |
#       문자열            토큰 목록          후위 표기 토큰               float                문자열

import logging
import math
import operator
import re
from enum import Enum
from typing import List, NamedTuple, Optional, Union

DISPLAY_LIMIT = 28  # 결과 표시 최대 길이(문자 수)

logger = logging.getLogger('calculator.evaluator')

# 부호(-)는 숫자 토큰의 일부, 지수 표기는 퍼센트 결과(예: 5e-05) 때문에 허용
_NUMBER_RE = re.compile(r'-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')


class CalcError(Enum):
    """호스트에 전달되는 오류 분류"""

    DIGIT_LIMIT_EXCEEDED = 'digit_limit_exceeded'
    INCOMPLETE_EXPRESSION = 'incomplete_expression'
    INVALID_TOKEN = 'invalid_token'
    MALFORMED_EXPRESSION = 'malformed_expression'
    DIVISION_BY_ZERO = 'division_by_zero'
    RESULT_TOO_LARGE = 'result_too_large'

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    CalcError.DIGIT_LIMIT_EXCEEDED: '최대 자릿수를 초과했습니다',
    CalcError.INCOMPLETE_EXPRESSION: '수식이 완성되지 않았습니다',
    CalcError.INVALID_TOKEN: '잘못된 수식입니다',
    CalcError.MALFORMED_EXPRESSION: '잘못된 수식입니다',
    CalcError.DIVISION_BY_ZERO: '0으로 나눌 수 없습니다',
    CalcError.RESULT_TOO_LARGE: '결과가 너무 큽니다',
}


class EvaluationError(ValueError):
    """평가 파이프라인 내부 오류의 기반 클래스. evaluate() 밖으로 나가지 않는다."""

    kind = CalcError.MALFORMED_EXPRESSION


class InvalidTokenError(EvaluationError):
    kind = CalcError.INVALID_TOKEN


class MalformedExpressionError(EvaluationError):
    kind = CalcError.MALFORMED_EXPRESSION


class DivisionByZeroError(EvaluationError):
    kind = CalcError.DIVISION_BY_ZERO


class ResultTooLargeError(EvaluationError):
    kind = CalcError.RESULT_TOO_LARGE


class Number(float):
    """숫자 토큰"""

    def __repr__(self) -> str:
        return 'Number(%s)' % float.__repr__(self)

    def __str__(self) -> str:
        return float.__repr__(self)


class Operator(Enum):
    """이항 연산자 토큰: 값은 수식에 쓰이는 ASCII 기호"""

    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]

    def apply(self, a: float, b: float) -> float:
        # 0 나누기는 무한대 전파에 맡기지 않고 계산 전에 막는다
        if self is Operator.DIV and b == 0.0:
            raise DivisionByZeroError('division by zero')
        return _FUNCS[self](a, b)

    def __str__(self) -> str:
        return self.value


_PRECEDENCE = {
    Operator.ADD: 1,
    Operator.SUB: 1,
    Operator.MUL: 2,
    Operator.DIV: 2,
}

_FUNCS = {
    Operator.ADD: operator.add,
    Operator.SUB: operator.sub,
    Operator.MUL: operator.mul,
    Operator.DIV: operator.truediv,
}

Token = Union[Number, Operator]


class EvalResult(NamedTuple):
    """성공(value, text) 또는 실패(error) 중 하나만 채워진 평가 결과"""

    value: Optional[float] = None
    text: Optional[str] = None
    error: Optional[CalcError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: float, text: str) -> 'EvalResult':
        return cls(value=value, text=text)

    @classmethod
    def failure(cls, error: CalcError) -> 'EvalResult':
        return cls(error=error)


def is_complete(expression: str) -> bool:
    """평가를 시작해도 되는 수식인지 검사한다(빈 문자열, 연산자로 끝남, 초기값 '0' 제외)."""
    return bool(expression) and not expression.endswith(' ') and expression != '0'


def parse_number(text: str) -> Optional[Number]:
    """유한한 10진수 문자열이면 Number, 아니면 None"""
    if not _NUMBER_RE.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return Number(value)


def tokenize(expression: str) -> List[Token]:
    """공백 하나로 구분된 수식을 토큰 목록으로 바꾼다."""
    tokens = []
    for text in expression.split(' '):
        if text in ('+', '-', '*', '/'):
            tokens.append(Operator(text))
            continue
        number = parse_number(text)
        if number is None:
            raise InvalidTokenError('invalid token: %r' % text)
        tokens.append(number)
    return tokens


def to_postfix(tokens: List[Token]) -> List[Token]:
    """Shunting-Yard 알고리즘으로 중위 표기를 후위 표기로 바꾼다.

    스택 top의 우선순위가 들어오는 연산자 이상이면 먼저 출력으로 옮기므로
    네 연산자 모두 왼쪽 결합이 된다.
    """
    out = []
    stack = []

    for token in tokens:
        if isinstance(token, Number):
            out.append(token)
        elif isinstance(token, Operator):
            while stack and stack[-1].precedence >= token.precedence:
                out.append(stack.pop())
            stack.append(token)
        else:
            raise InvalidTokenError('found foreign object: %r' % (token,))

    # 남은 연산자는 LIFO 순서로
    while stack:
        out.append(stack.pop())

    return out


def eval_postfix(postfix: List[Token]) -> float:
    """값 스택으로 후위 표기 토큰을 계산한다."""
    stack = []

    for token in postfix:
        if isinstance(token, Number):
            stack.append(float(token))
        elif isinstance(token, Operator):
            if len(stack) < 2:
                raise MalformedExpressionError('not enough operands for %s' % token)
            b = stack.pop()  # 두 번째 피연산자
            a = stack.pop()  # 첫 번째 피연산자
            stack.append(token.apply(a, b))
        else:
            raise InvalidTokenError('found alien object: %r' % (token,))

    # 계산이 끝나면 스택에 정확히 하나의 값이 남아야 한다
    if len(stack) != 1:
        raise MalformedExpressionError('%d values left on stack' % len(stack))
    return stack[0]


def format_result(value: float, display_limit: int = DISPLAY_LIMIT) -> str:
    """결과를 표시 문자열로 바꾼다: 정수면 소수점 없이, 아니면 repr 형식."""
    # 극단적인 크기 등으로 생긴 무한대/NaN도 0 나누기로 분류
    if not math.isfinite(value):
        raise DivisionByZeroError('non-finite result: %r' % value)

    if value % 1 == 0:
        text = str(int(value))
    else:
        text = repr(value)

    if len(text) > display_limit:
        raise ResultTooLargeError('%d characters exceeds %d' % (len(text), display_limit))
    return text


def evaluate(expression: str, display_limit: int = DISPLAY_LIMIT) -> EvalResult:
    """수식 문자열을 계산해 EvalResult로 돌려준다. 어떤 입력에도 예외를 던지지 않는다."""
    try:
        postfix = to_postfix(tokenize(expression))
        logger.debug('[후위] %s -> %s', expression, ' '.join(str(t) for t in postfix))
        value = eval_postfix(postfix)
        text = format_result(value, display_limit)
    except EvaluationError as e:
        logger.warning('[실패] %r: %s (%s)', expression, e.kind.name, e)
        return EvalResult.failure(e.kind)

    logger.info('[계산] %s = %s', expression, text)
    return EvalResult.success(value, text)
