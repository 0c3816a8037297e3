import os
import pytest


# List of environment variables that may be modified by tests
_ENV_VARS_TO_ISOLATE = [
    "X_API_KEY",
    "DEBUG",
    "LOG_LEVEL",
    "LOG_JSON",
    "METRICS_ENABLED",
    "CORS_ORIGINS",
    "ALLOWED_HOSTS",
]


@pytest.fixture(autouse=True)
def env_isolation():
    """Isolate environment variables between tests."""
    backup = {k: os.environ.get(k) for k in _ENV_VARS_TO_ISOLATE}
    try:
        yield
    finally:
        for k, v in backup.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v


@pytest.fixture(autouse=True)
def settings_isolation():
    """Drop cached settings so env changes in one test do not leak."""
    from src.core.config import reset_settings

    reset_settings()
    try:
        yield
    finally:
        reset_settings()


@pytest.fixture
def default_snapshot():
    """Common starting configuration: E6010 1/8" flat butt joint on DC+."""
    from src.core.knowledge.welding import ParameterSnapshot

    return ParameterSnapshot(
        electrode="E6010",
        electrode_size='1/8"',
        position="Flat",
        metal_thickness='Medium (1/8"-3/16")',
        joint_type="Butt",
        machine_type="DC+",
    )
