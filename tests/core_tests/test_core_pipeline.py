"""Tests for core/pipeline.py."""

from __future__ import annotations

import unittest

from core.cli_errors import ConfigError, ExitCode
from core.pipeline import BaseProducer, RequestConsumer, ResultEnvelope, SafeProcessor, run_pipeline
from tests.fixtures import capture_stdout


class _Doubler(SafeProcessor[int, int]):
    def _process_safe(self, payload: int) -> int:
        if payload < 0:
            raise ConfigError("negative input", hint="pass a positive number")
        if payload == 0:
            raise RuntimeError("zero")
        return payload * 2


class _Collector(BaseProducer):
    def __init__(self):
        self.seen = []

    def _produce_success(self, payload, diagnostics):
        self.seen.append(payload)


class TestResultEnvelope(unittest.TestCase):

    def test_ok_is_case_insensitive(self):
        self.assertTrue(ResultEnvelope(status="Success").ok())
        self.assertFalse(ResultEnvelope(status="error").ok())

    def test_unwrap(self):
        self.assertEqual(ResultEnvelope(status="success", payload=[1]).unwrap(), [1])
        with self.assertRaises(ValueError) as ctx:
            ResultEnvelope(status="error", diagnostics={"message": "bad plan"}).unwrap()
        self.assertEqual(str(ctx.exception), "bad plan")
        with self.assertRaises(ValueError) as ctx:
            ResultEnvelope(status="error").unwrap()
        self.assertEqual(str(ctx.exception), "No payload")


class TestSafeProcessor(unittest.TestCase):

    def test_success(self):
        env = _Doubler().process(4)
        self.assertTrue(env.ok())
        self.assertEqual(env.payload, 8)

    def test_cli_error_keeps_code_and_hint(self):
        env = _Doubler().process(-1)
        self.assertFalse(env.ok())
        self.assertEqual(env.diagnostics["code"], int(ExitCode.CONFIG_ERROR))
        self.assertEqual(env.diagnostics["hint"], "pass a positive number")

    def test_unexpected_error_uses_generic_code(self):
        env = _Doubler().process(0)
        self.assertEqual(env.diagnostics, {"message": "zero", "code": int(ExitCode.ERROR)})


class TestRunPipeline(unittest.TestCase):

    def test_consumer_returns_request(self):
        self.assertEqual(RequestConsumer({"year": 2025}).consume(), {"year": 2025})

    def test_success_reaches_producer(self):
        producer = _Collector()
        self.assertEqual(run_pipeline(21, _Doubler(), producer), 0)
        self.assertEqual(producer.seen, [42])

    def test_failure_prints_diagnostics(self):
        producer = _Collector()
        with capture_stdout() as buf:
            code = run_pipeline(-5, _Doubler(), producer)
        self.assertEqual(code, int(ExitCode.CONFIG_ERROR))
        self.assertEqual(producer.seen, [])
        self.assertEqual(buf.getvalue(), "negative input\nHint: pass a positive number\n")


if __name__ == "__main__":
    unittest.main()
