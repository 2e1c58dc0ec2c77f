# calculator_window.py
# Python 3.x, PyQt5
# PEP 8 준수, 문자열은 기본적으로 ' ' 사용

import argparse
import logging
import sys
from typing import Optional

from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtGui import QFont, QKeySequence
from PyQt5.QtWidgets import (
    QApplication,
    QWidget,
    QGridLayout,
    QVBoxLayout,
    QPushButton,
    QLineEdit,
    QLabel,
    QShortcut,
)

from calculator import Calculator, CalculatorConfig, HISTORY_SIZE, setup_logger
from expression_builder import MAX_DIGITS
from expression_evaluator import DISPLAY_LIMIT, CalcError

NOTICE_MS = 2000  # 알림 표시 시간(ms)

# UI 기호 -> 내부 ASCII 연산자
UI_OPERATORS = {'+': '+', '−': '-', '×': '*', '÷': '/'}


def to_internal_op(ui_op: str) -> str:
    return UI_OPERATORS.get(ui_op, ui_op)


class CalculatorWindow(QWidget):
    """PyQt5 UI: 버튼 → Calculator 엔진 연결"""

    def __init__(self, config: Optional[CalculatorConfig] = None) -> None:
        super().__init__()
        self.engine = Calculator(config)
        self._build_ui()

    def _build_ui(self) -> None:
        self.setWindowTitle('Calculator')
        root = QVBoxLayout()
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(8)
        self.setLayout(root)

        # 직전 수식
        self.last_operation = QLabel('')
        self.last_operation.setAlignment(Qt.AlignRight)
        root.addWidget(self.last_operation)

        self.display = QLineEdit()
        self.display.setReadOnly(True)
        self.display.setAlignment(Qt.AlignRight)
        font = QFont(self.display.font())
        font.setPointSize(28)
        self.display.setFont(font)
        root.addWidget(self.display)

        # 토스트 대용: 잠깐 보였다 사라지는 알림
        self.notice = QLabel('')
        self.notice.setAlignment(Qt.AlignCenter)
        self.notice_timer = QTimer(self)
        self.notice_timer.setSingleShot(True)
        self.notice_timer.timeout.connect(lambda: self.notice.setText(''))
        root.addWidget(self.notice)

        grid = QGridLayout()
        grid.setSpacing(6)
        root.addLayout(grid)

        buttons = [
            ['AC', '+/-', '%', '÷'],
            ['7',  '8',   '9', '×'],
            ['4',  '5',   '6', '−'],
            ['1',  '2',   '3', '+'],
            ['0',  '.',   '⌫', '='],
        ]

        for r, row in enumerate(buttons):
            for c, label in enumerate(row):
                btn = QPushButton(label)
                btn.setMinimumHeight(56)
                btn.setCursor(Qt.PointingHandCursor)
                # clicked는 checked(bool) 인자를 내보내므로 첫 인자를 흡수하도록 작성
                btn.clicked.connect(lambda checked=False, ch=label: self.on_button(ch))
                grid.addWidget(btn, r, c)

        undo = QShortcut(QKeySequence.Undo, self)
        undo.activated.connect(self.on_undo)

        self.resize(360, 560)
        self.refresh()

    def notify(self, error: CalcError) -> None:
        self.notice.setText(error.message)
        self.notice_timer.start(NOTICE_MS)

    def refresh(self) -> None:
        self.display.setText(self.engine.display_text())
        self.last_operation.setText(self.engine.last_operation)

    def on_undo(self) -> None:
        if self.engine.undo():
            self.refresh()

    def on_button(self, ch: str) -> None:
        error = None
        if ch == 'AC':
            self.engine.clear()
        elif ch == '+/-':
            self.engine.toggle_sign()
        elif ch == '%':
            self.engine.apply_percent()
        elif ch == '⌫':
            self.engine.backspace()
        elif ch == '=':
            error = self.engine.evaluate().error
        elif ch in UI_OPERATORS:
            self.engine.append_operator(to_internal_op(ch))
        elif ch == '.':
            self.engine.append_dot()
        elif ch.isdigit():
            error = self.engine.append_digit(ch)

        if error is not None:
            self.notify(error)
        self.refresh()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='사칙연산 계산기(연산자 우선순위 지원)'
    )
    parser.add_argument('--max-digits', type=int, default=MAX_DIGITS,
                        help='숫자 하나의 정수부 최대 자릿수(기본값: 12)')
    parser.add_argument('--display-limit', type=int, default=DISPLAY_LIMIT,
                        help='결과 표시 최대 길이(기본값: 28)')
    parser.add_argument('--history', type=int, default=HISTORY_SIZE,
                        help='되돌리기 기록 수(0 이면 끔, 기본값: 50)')
    parser.add_argument('--log', default=None,
                        help='로그 파일 경로(기본값: 콘솔만)')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='로그 레벨(기본값: INFO)')
    return parser.parse_args(argv)


def main() -> None:
    args = parse_args()
    logger = setup_logger(args.log, getattr(logging, args.log_level))
    config = CalculatorConfig(
        max_digits=args.max_digits,
        display_limit=args.display_limit,
        history_size=max(args.history, 0),
    )
    logger.info('[시작] 자릿수 제한=%d, 표시 제한=%d', config.max_digits, config.display_limit)

    app = QApplication(sys.argv[:1])
    w = CalculatorWindow(config)
    w.show()
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
