import logging
import random
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from calculator import Calculator, CalculatorConfig, setup_logger
from expression_evaluator import CalcError


def press(engine, keys):
    """'12+3' 처럼 버튼 순서를 문자열로 받아 엔진에 입력한다."""
    for key in keys:
        if key.isdigit():
            engine.append_digit(key)
        elif key in '+-*/':
            engine.append_operator(key)
        elif key == '.':
            engine.append_dot()
        elif key == '~':
            engine.toggle_sign()
        elif key == '%':
            engine.apply_percent()
        elif key == '<':
            engine.backspace()


class TestCalculator(unittest.TestCase):
    def test_initial_state(self):
        engine = Calculator()
        self.assertEqual(engine.display_text(), '0')
        self.assertFalse(engine.state.result_displayed)
        self.assertEqual(engine.last_operation, '')

    def test_evaluate_moves_expression_to_last_operation(self):
        engine = Calculator()
        press(engine, '3+4*2')
        result = engine.evaluate()
        self.assertTrue(result.ok)
        self.assertEqual(result.value, 11.0)
        self.assertEqual(engine.last_operation, '3 + 4 * 2')
        self.assertEqual(engine.display_text(), '11')
        self.assertTrue(engine.state.result_displayed)

    def test_continue_from_result(self):
        engine = Calculator()
        press(engine, '6/4')
        engine.evaluate()
        press(engine, '*2')
        self.assertEqual(engine.display_text(), '1.5 * 2')
        self.assertEqual(engine.evaluate().text, '3')

    def test_digit_after_result_starts_fresh(self):
        engine = Calculator()
        press(engine, '1+1')
        engine.evaluate()
        press(engine, '7')
        self.assertEqual(engine.display_text(), '7')

    def test_incomplete_expression(self):
        engine = Calculator()
        self.assertIs(engine.evaluate().error, CalcError.INCOMPLETE_EXPRESSION)
        press(engine, '5+')
        result = engine.evaluate()
        self.assertIs(result.error, CalcError.INCOMPLETE_EXPRESSION)
        self.assertEqual(engine.display_text(), '5 + ')

    def test_failure_leaves_state(self):
        engine = Calculator()
        press(engine, '5/0')
        self.assertIs(engine.evaluate().error, CalcError.DIVISION_BY_ZERO)
        self.assertEqual(engine.display_text(), '5 / 0')
        self.assertEqual(engine.last_operation, '')

    def test_digit_limit_warning(self):
        engine = Calculator(CalculatorConfig(max_digits=3))
        press(engine, '123')
        self.assertIs(engine.append_digit('4'), CalcError.DIGIT_LIMIT_EXCEEDED)
        self.assertEqual(engine.display_text(), '123')

    def test_display_limit(self):
        engine = Calculator(CalculatorConfig(display_limit=4))
        press(engine, '1/3')
        self.assertIs(engine.evaluate().error, CalcError.RESULT_TOO_LARGE)

    def test_clear_resets_everything(self):
        engine = Calculator()
        press(engine, '9*9')
        engine.evaluate()
        engine.clear()
        self.assertEqual(engine.display_text(), '0')
        self.assertFalse(engine.state.result_displayed)
        self.assertEqual(engine.last_operation, '')

    def test_backspace_after_result_clears_last_operation(self):
        engine = Calculator()
        press(engine, '2+2')
        engine.evaluate()
        engine.backspace()
        self.assertEqual(engine.display_text(), '0')
        self.assertEqual(engine.last_operation, '')

    def test_undo(self):
        engine = Calculator()
        self.assertFalse(engine.undo())
        press(engine, '12+')
        self.assertTrue(engine.undo())
        self.assertEqual(engine.display_text(), '12')
        self.assertTrue(engine.undo())
        self.assertEqual(engine.display_text(), '1')

    def test_noop_edits_do_not_fill_history(self):
        engine = Calculator()
        press(engine, '3.')
        press(engine, '...')
        self.assertTrue(engine.undo())
        self.assertEqual(engine.display_text(), '3')

    def test_history_is_bounded(self):
        engine = Calculator(CalculatorConfig(history_size=2))
        press(engine, '1234')
        self.assertTrue(engine.undo())
        self.assertTrue(engine.undo())
        self.assertFalse(engine.undo())
        self.assertEqual(engine.display_text(), '12')

    def test_zero_history_disables_undo(self):
        engine = Calculator(CalculatorConfig(history_size=0))
        press(engine, '123456789')
        self.assertEqual(len(engine._history), 0)
        self.assertFalse(engine.undo())
        self.assertEqual(engine.display_text(), '123456789')

    def test_undo_after_evaluate_restores_last_operation(self):
        engine = Calculator()
        press(engine, '3+4')
        engine.evaluate()
        self.assertTrue(engine.undo())
        self.assertEqual(engine.display_text(), '3 + 4')
        self.assertFalse(engine.state.result_displayed)
        self.assertEqual(engine.last_operation, '')

    def test_undo_after_clear_restores_result(self):
        engine = Calculator()
        press(engine, '3+4')
        engine.evaluate()
        engine.clear()
        self.assertTrue(engine.undo())
        self.assertEqual(engine.display_text(), '7')
        self.assertTrue(engine.state.result_displayed)
        self.assertEqual(engine.last_operation, '3 + 4')

    def test_random_edits_never_raise(self):
        rng = random.Random(1234)
        keys = '0123456789+-*/.~%<'
        for _ in range(200):
            engine = Calculator()
            press(engine, ''.join(rng.choice(keys) for _ in range(rng.randint(1, 25))))
            result = engine.evaluate()
            self.assertIsNotNone(result)
            self.assertNotEqual(result.ok, result.error is not None)


class TestSetupLogger(unittest.TestCase):
    def setUp(self):
        self.logger = logging.getLogger('calculator')
        self.saved = list(self.logger.handlers)
        self.saved_level = self.logger.level
        self.logger.handlers = []

    def tearDown(self):
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers = self.saved
        self.logger.setLevel(self.saved_level)

    def test_console_and_file(self):
        log_path = ROOT / 'tests' / '_calculator_test.log'
        try:
            logger = setup_logger(str(log_path), logging.DEBUG)
            self.assertEqual(len(logger.handlers), 2)
            self.assertIs(setup_logger(), logger)
            self.assertEqual(len(logger.handlers), 2)
        finally:
            for handler in self.logger.handlers:
                handler.close()
            if log_path.exists():
                log_path.unlink()

    def test_console_only(self):
        logger = setup_logger()
        self.assertEqual(len(logger.handlers), 1)


if __name__ == '__main__':
    unittest.main()
