from pathlib import Path

from elasticlink.config.general import GeneralConfig


def write_default_configs(directory: Path = Path("config")) -> Path:
    """Write out config defaults, returning the written file."""
    path = (directory / "config.default.yaml").resolve()
    GeneralConfig.write_default(path)
    return path
