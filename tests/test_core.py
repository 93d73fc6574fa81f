"""
Unit tests for LK-TSP core utilities.
Tests logger setup and exception formatting.
"""

import unittest
import logging
import tempfile
import os

# Add project root to path
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lk_tsp.core.exceptions import (
    InvalidConfigurationError, InvalidExchangeError, TourFileMismatchError, TsplibFormatError
)
from lk_tsp.core.logger import get_logger, setup_logger


class TestLogger(unittest.TestCase):
    """Test logger setup."""

    def _cleanup(self, logger):
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_setup_logger_with_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            logger = setup_logger('lk_tsp_test.file', log_dir=temp_dir)
            try:
                self.assertEqual(len(logger.handlers), 2)
                logger.info("Starting Lin-Kernighan search...")
                log_files = os.listdir(temp_dir)
                self.assertEqual(len(log_files), 1)
                self.assertTrue(log_files[0].startswith('lk_tsp_'))
            finally:
                self._cleanup(logger)

    def test_setup_logger_with_explicit_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = os.path.join(temp_dir, 'nested', 'run.log')
            logger = setup_logger('lk_tsp_test.explicit', log_file=log_file, log_dir=temp_dir)
            try:
                self.assertEqual(len(logger.handlers), 2)
                self.assertEqual(os.listdir(temp_dir), ['nested'])
                self.assertTrue(os.path.exists(log_file))
            finally:
                self._cleanup(logger)

    def test_setup_logger_is_idempotent(self):
        logger = setup_logger('lk_tsp_test.console', level=logging.DEBUG, file_logging=False)
        try:
            self.assertEqual(len(logger.handlers), 1)
            self.assertIs(setup_logger('lk_tsp_test.console', file_logging=False), logger)
            self.assertEqual(len(logger.handlers), 1)
            self.assertEqual(logger.level, logging.DEBUG)
        finally:
            self._cleanup(logger)

    def test_get_logger(self):
        logger = get_logger('lk_tsp_test.get')
        try:
            self.assertTrue(logger.handlers)
            self.assertIs(get_logger('lk_tsp_test.get'), logger)
        finally:
            self._cleanup(logger)


class TestExceptions(unittest.TestCase):
    """Test exception messages and details."""

    def test_tsplib_format_error(self):
        error = TsplibFormatError("unknown keyword FOO", 7, 'FOO')
        self.assertEqual(error.message, "Invalid TSPLIB format: unknown keyword FOO (line 7)")
        self.assertEqual(error.details, {'line': 7, 'keyword': 'FOO'})
        self.assertIn("Details", str(error))

    def test_tour_file_mismatch_error(self):
        error = TourFileMismatchError('other.opt.tour', 'square4')
        self.assertIn("does not belong", str(error))
        self.assertEqual(error.details['problem_name'], 'square4')

    def test_invalid_exchange_error(self):
        error = InvalidExchangeError([0, 1, 3, 4, 0], "result is not a Hamiltonian cycle")
        self.assertEqual(error.details['walk'], [0, 1, 3, 4, 0])
        self.assertTrue(error.message.endswith("not a Hamiltonian cycle"))

    def test_invalid_configuration_error(self):
        error = InvalidConfigurationError('candidate_k', 0, "integer >= 1")
        self.assertEqual(error.message, "Invalid configuration parameter: candidate_k = 0 (expected: integer >= 1)")

    def test_plain_message(self):
        self.assertEqual(str(TsplibFormatError()), "Invalid TSPLIB format")


if __name__ == '__main__':
    unittest.main()
