"""
Test configuration for Lumen tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from environment import TOP_ENVIRONMENT, extend_env
from interpreter import create_interpreter
from parsing import create_parser
from values import NumberValue


@pytest.fixture
def parser():
  """Provide a fresh reader for each test"""
  return create_parser()


@pytest.fixture
def interpreter():
  """Provide a fresh interpreter for each test"""
  return create_interpreter()


@pytest.fixture
def env():
  """Top-level environment extended with x = 8"""
  return extend_env(TOP_ENVIRONMENT, ["x"], [NumberValue(8.0)])
