# expression_builder.py
# Python 3.x
# PEP 8 준수, 문자열은 기본적으로 ' ' 사용

"""수식 편집기: 편집 명령마다 EditorState -> EditorState 를 돌려주는 순수 함수 모음

수식은 '12 + -3.5' 처럼 이항 연산자 앞뒤에 공백 하나를 두는 문자열이다.
마지막 공백 뒤의 부분이 현재 편집 중인 숫자(마지막 토큰)다.
"""

import logging
from decimal import Decimal
from typing import NamedTuple, Optional, Tuple

from expression_evaluator import CalcError

INITIAL_EXPRESSION = '0'
MAX_DIGITS = 12  # 숫자 토큰 정수부 자릿수 제한(부호 제외)
OPERATORS = ('+', '-', '*', '/')

logger = logging.getLogger('calculator.builder')


class EditorState(NamedTuple):
    expression: str = INITIAL_EXPRESSION
    result_displayed: bool = False  # '=' 직후, 다음 숫자/점 입력은 새 수식을 시작


def last_token(expression: str) -> str:
    """마지막 공백 뒤의 토큰(공백이 없으면 전체)"""
    return expression.rsplit(' ', 1)[-1]


def integer_part(token: str) -> str:
    """부호와 소수부를 뺀 정수부"""
    return token.lstrip('-').split('.', 1)[0]


def _replace_last_token(expression: str, token: str) -> str:
    head, sep, _ = expression.rpartition(' ')
    return head + sep + token


def append_digit(state: EditorState, digit: str,
                 max_digits: int = MAX_DIGITS) -> Tuple[EditorState, Optional[CalcError]]:
    if len(digit) != 1 or digit not in '0123456789':
        raise ValueError('not a digit: %r' % digit)

    if state.result_displayed:
        return EditorState(digit, False), None

    expression = state.expression
    if len(integer_part(last_token(expression))) >= max_digits:
        logger.warning('[거부] 자릿수 제한 %d 초과: %s', max_digits, expression)
        return state, CalcError.DIGIT_LIMIT_EXCEEDED

    if expression == INITIAL_EXPRESSION:
        return state._replace(expression=digit), None
    return state._replace(expression=expression + digit), None


def append_operator(state: EditorState, op: str) -> EditorState:
    if op not in OPERATORS:
        raise ValueError('unknown operator: %r' % op)

    expression = state.expression
    if not expression:
        return state

    # 직전 결과가 첫 피연산자가 된다
    state = state._replace(result_displayed=False)

    if expression.endswith(' '):
        # 연속 입력: 대기 중인 연산자를 교체
        expression = expression.rstrip(' ').rpartition(' ')[0]
    return state._replace(expression='%s %s ' % (expression, op))


def append_dot(state: EditorState) -> EditorState:
    if state.result_displayed:
        return EditorState('0.', False)

    expression = state.expression
    if '.' in last_token(expression):
        return state

    if not expression or expression.endswith(' '):
        expression += '0.'
    elif expression == INITIAL_EXPRESSION:
        expression = '0.'
    else:
        expression += '.'
    return state._replace(expression=expression)


def toggle_sign(state: EditorState) -> EditorState:
    expression = state.expression
    if not expression or expression.endswith(' '):
        # 연산자 뒤: 음수 입력 시작
        return state._replace(expression=expression + '-')

    token = last_token(expression)
    token = token[1:] if token.startswith('-') else '-' + token
    return state._replace(expression=_replace_last_token(expression, token))


def apply_percent(state: EditorState) -> EditorState:
    expression = state.expression
    if not expression or expression.endswith(' '):
        return state

    try:
        value = float(last_token(expression)) / 100.0
    except ValueError:
        # 숫자가 아닌 토큰('-' 등)은 무시
        return state
    # 지수 표기(5e-06) 대신 고정 소수점으로 두어 이어지는 숫자 입력이 소수부에 붙게 한다
    text = format(Decimal(repr(value)), 'f')
    return state._replace(expression=_replace_last_token(expression, text))


def backspace(state: EditorState) -> EditorState:
    if state.result_displayed:
        return clear()

    expression = state.expression
    if not expression or expression == INITIAL_EXPRESSION:
        return state

    if expression.endswith(' '):
        # 마지막 연산자 토큰과 앞뒤 공백을 한 번에 제거
        expression = expression.rstrip(' ').rpartition(' ')[0]
    else:
        expression = expression[:-1]
    return state._replace(expression=expression or INITIAL_EXPRESSION)


def clear(state: Optional[EditorState] = None) -> EditorState:
    return EditorState()


def show_result(state: EditorState, text: str) -> EditorState:
    """계산 결과를 새 수식으로 두고 result_displayed 를 켠다."""
    return EditorState(text, True)
