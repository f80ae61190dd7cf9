import sys
import os
import pytest

# Add the project root directory to the python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.modules.notebook.services.demo_backend import DemoBackend
from app.modules.notebook.services.latency import LatencyProfile
from app.modules.notebook.services.resolver import ResponseResolver


@pytest.fixture
def resolver():
    return ResponseResolver()


@pytest.fixture
def demo_backend():
    return DemoBackend(latency=LatencyProfile.instant())
