"""Configuration helpers for the SkyMesh core."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_ASSET_ROOT = "assets/location_images"
DEFAULT_ASSET_EXTENSION = ".png"


@dataclass
class SkyMeshConfig:
    """Configuration values for the place resolver and rule engine.

    Everything has a working default so the core runs with no environment at
    all; deployments override the catalog location, asset layout or seed.
    """

    catalog_path: Optional[str] = None
    asset_root: str = DEFAULT_ASSET_ROOT
    asset_extension: str = DEFAULT_ASSET_EXTENSION
    random_seed: Optional[int] = None
    log_level: str = "INFO"
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "SkyMeshConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and environment variables take precedence over it.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("SKYMESH_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = f"SKYMESH_{key.upper()}"
            return os.getenv(env_key, yaml_config.get(key, default))

        raw_seed = get_value("random_seed")
        try:
            random_seed = int(raw_seed) if raw_seed not in (None, "") else None
        except ValueError as exc:
            raise ValueError(f"random_seed must be an integer, got {raw_seed!r}") from exc

        extension = str(get_value("asset_extension", DEFAULT_ASSET_EXTENSION) or DEFAULT_ASSET_EXTENSION)
        if not extension.startswith("."):
            extension = f".{extension}"

        return cls(
            catalog_path=get_value("catalog_path") or None,
            asset_root=str(get_value("asset_root", DEFAULT_ASSET_ROOT) or DEFAULT_ASSET_ROOT),
            asset_extension=extension,
            random_seed=random_seed,
            log_level=str(os.getenv("LOG_LEVEL", yaml_config.get("log_level", "INFO"))),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a flat ``key: value`` YAML file."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
