"""
Pytest configuration and fixtures for the pygabor test suite.

This file contains shared fixtures, test configuration, and utilities
used across the test suite.
"""
import os
import sys
import pytest
import numpy as np


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Add the package root to Python path for testing
    package_root = os.path.dirname(os.path.dirname(__file__))
    if package_root not in sys.path:
        sys.path.insert(0, package_root)

    for marker, description in [
        ("importtest", "import smoke tests"),
        ("unit", "fast unit tests"),
        ("integration", "end to end workflows"),
        ("slow", "statistical or large tests"),
        ("gpu", "tests needing a Taichi backend"),
    ]:
        config.addinivalue_line("markers", f"{marker}: {description}")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        if "gpu" in item.keywords or "taichi" in item.name.lower():
            item.add_marker("slow")

        # Mark import tests for easy selection
        if "import" in item.name.lower() or "test_imports.py" in str(item.fspath):
            item.add_marker("importtest")


@pytest.fixture(scope="session")
def sample_points():
    """Reproducible query points spread over several cells."""
    rng = np.random.default_rng(42)
    return rng.random((64, 3)) * 6.0 - 3.0


@pytest.fixture
def default_params():
    from pygabor.noise import NoiseParams

    return NoiseParams()


@pytest.fixture
def skip_if_no_taichi():
    """Skip test if Taichi is not available or fails to initialize."""
    try:
        import taichi as ti
        ti.init(arch=ti.cpu, offline_cache=False)
        return True
    except Exception:
        pytest.skip("Taichi not available or initialization failed")


class SurfaceFactory:
    """Helper class for building positions that carry surface derivatives."""

    @staticmethod
    def plane(points, dpdx=(1.0, 0.0, 0.0), dpdy=(0.0, 1.0, 0.0)):
        """Positions on a plane with constant tangents."""
        from pygabor.general_algorithms.dual import Dual

        points = np.asarray(points, dtype=np.float64)
        d = np.empty((2,) + points.shape)
        d[0] = np.asarray(dpdx, dtype=np.float64)
        d[1] = np.asarray(dpdy, dtype=np.float64)
        return Dual(points, d)

    @staticmethod
    def shifted(position, k, h):
        """Move each position by h along its own derivative slot k."""
        from pygabor.general_algorithms.dual import Dual

        return Dual(position.val + h * position.d[k], position.d)


@pytest.fixture
def surfaces():
    """Provide access to surface construction utilities."""
    return SurfaceFactory()
