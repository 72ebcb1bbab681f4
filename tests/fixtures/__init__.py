"""Shared test fixtures for the depgate test suite.

Available Fixtures
==================

Configuration (from tests/fixtures/config.py)
---------------------------------------------

isolated_home: Points HOME at a temporary directory so no user config is read.
project_dir: A temporary working directory for depgate.yaml files.
sample_config: DepgateConfig loaded from the sample depgate.yaml.

Dependencies (from tests/fixtures/dependencies.py)
--------------------------------------------------

FakeEnvironment: In-memory stand-in for modules, settings and components.
fake_environment: A fresh FakeEnvironment per test.
"""
