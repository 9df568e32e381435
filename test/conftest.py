"""
Test configuration for Abacus tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from stdlib import DEFAULT_ENV
from interpreter import evaluate_text, is_success


@pytest.fixture
def run():
  """Evaluate a sequence of statements, threading the environment like a session"""
  def run_statements(*lines, env=DEFAULT_ENV):
    result = None
    for line in lines:
      result = evaluate_text(env, line)
      if is_success(result):
        env = result['env']
    return result
  return run_statements
