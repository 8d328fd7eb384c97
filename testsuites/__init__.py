"""
Test suites package.

Kept importable so tests can share in-memory fakes
(`from testsuites.fakes import FakePage`) and so `run_tests.py` can
resolve suite paths.
"""
