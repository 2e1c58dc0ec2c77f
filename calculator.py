# calculator.py
# Python 3.x
# PEP 8 준수, 문자열은 기본적으로 ' ' 사용

import logging
import sys
from collections import deque
from typing import Deque, NamedTuple, Optional, Tuple

import expression_builder as builder
from expression_builder import EditorState, MAX_DIGITS
from expression_evaluator import DISPLAY_LIMIT, CalcError, EvalResult, evaluate, is_complete

HISTORY_SIZE = 50  # undo 로 되돌릴 수 있는 편집 수(0 이면 undo 없음)


class CalculatorConfig(NamedTuple):
    max_digits: int = MAX_DIGITS
    display_limit: int = DISPLAY_LIMIT
    history_size: int = HISTORY_SIZE


def setup_logger(log_path: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """콘솔과 (지정 시) 파일(UTF-8)로 로그를 남기는 'calculator' 로거를 설정한다."""
    logger = logging.getLogger('calculator')
    if logger.handlers:
        return logger

    logger.setLevel(level)
    formatter = logging.Formatter(
        fmt='%(asctime)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 콘솔
    sh = logging.StreamHandler(sys.stdout)
    sh.setLevel(level)
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    # 파일(UTF-8)
    if log_path:
        fh = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        fh.setLevel(level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger


logger = logging.getLogger('calculator.session')


class Calculator:
    """연산 엔진: 현재 편집 상태와 직전 수식(last operation)을 보관"""

    def __init__(self, config: Optional[CalculatorConfig] = None) -> None:
        self.config = config or CalculatorConfig()
        self.state = EditorState()
        self.last_operation = ''
        # (편집 상태, 직전 수식) 쌍을 보관, 가장 오래된 기록부터 버려진다
        self._history: Deque[Tuple[EditorState, str]] = deque(maxlen=max(self.config.history_size, 0))

    def _commit(self, state: EditorState, last_operation: Optional[str] = None) -> EditorState:
        # 상태는 불변 값이므로 통째로 교체하고 이전 값은 undo 용으로 보관
        if last_operation is None:
            last_operation = self.last_operation
        if (state, last_operation) != (self.state, self.last_operation):
            self._history.append((self.state, self.last_operation))
            self.state = state
            self.last_operation = last_operation
        return self.state

    def append_digit(self, digit: str) -> Optional[CalcError]:
        state, warning = builder.append_digit(self.state, digit, self.config.max_digits)
        self._commit(state)
        return warning

    def append_operator(self, op: str) -> None:
        self._commit(builder.append_operator(self.state, op))

    def append_dot(self) -> None:
        self._commit(builder.append_dot(self.state))

    def toggle_sign(self) -> None:
        self._commit(builder.toggle_sign(self.state))

    def apply_percent(self) -> None:
        self._commit(builder.apply_percent(self.state))

    def backspace(self) -> None:
        last_operation = '' if self.state.result_displayed else None
        self._commit(builder.backspace(self.state), last_operation)

    def clear(self) -> None:
        self._commit(builder.clear(self.state), '')

    def undo(self) -> bool:
        if not self._history:
            return False
        self.state, self.last_operation = self._history.pop()
        return True

    def evaluate(self) -> EvalResult:
        expression = self.state.expression
        if not is_complete(expression):
            logger.warning('[실패] 미완성 수식: %r', expression)
            return EvalResult.failure(CalcError.INCOMPLETE_EXPRESSION)

        result = evaluate(expression, self.config.display_limit)
        if result.ok:
            self._commit(builder.show_result(self.state, result.text), expression)
        return result

    def display_text(self) -> str:
        return self.state.expression
