"""
Test configuration for the Lox pipeline tests
"""

import io
import sys
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from error_handling import create_error_handler
from pipeline import create_session


@pytest.fixture
def err():
  """Captures diagnostics"""
  return io.StringIO()


@pytest.fixture
def out():
  """Captures print output"""
  return io.StringIO()


@pytest.fixture
def error_handler(err):
  return create_error_handler(stream=err)


@pytest.fixture
def session(out, err):
  return create_session(out=out, err=err)
