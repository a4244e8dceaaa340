"""
Configuration resolution for the tv-devops deployment.

Turns raw environment input into an immutable Configuration. Defaults are
substituted for absent values and conditional requirements are checked here,
before any resource declaration is built.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import ConfigurationError

DEFAULT_REGION = "us-west-2"
DEFAULT_PROJECT = "tv-devops"
DEFAULT_ENVIRONMENT = "dev"
DEFAULT_ACCOUNT_ID = "342573630114"
DEFAULT_CONTAINER_PORT = 3000
DEFAULT_BACKEND_MODE = "local"

BACKEND_MODES = ("local", "remote")

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


@dataclass(frozen=True)
class Configuration:
    """
    Resolved parameters for a single synthesis run.

    Created once per run and threaded explicitly through every builder.
    Builders never read the process environment themselves.
    """

    region: str = DEFAULT_REGION
    project: str = DEFAULT_PROJECT
    environment: str = DEFAULT_ENVIRONMENT
    account_id: str = DEFAULT_ACCOUNT_ID
    image_uri: str = ""
    container_port: int = DEFAULT_CONTAINER_PORT
    backend_mode: str = DEFAULT_BACKEND_MODE
    state_bucket: Optional[str] = None
    lock_table: Optional[str] = None
    state_key: str = ""
    profile: Optional[str] = None
    alerts_enabled: bool = False
    alert_email: Optional[str] = None
    registry_enabled: bool = True

    def __post_init__(self) -> None:
        # Frozen: derived defaults have to bypass __setattr__
        if not self.image_uri:
            object.__setattr__(
                self,
                "image_uri",
                default_image_uri(self.account_id, self.region, self.project, self.environment),
            )
        if not self.state_key:
            object.__setattr__(self, "state_key", f"{self.project}/{self.environment}/terraform.tfstate")

    @property
    def prefix(self) -> str:
        """Name prefix shared by every resource: ``<project>-<environment>``."""
        return f"{self.project}-{self.environment}"

    @property
    def availability_zones(self) -> Tuple[str, str]:
        return (f"{self.region}a", f"{self.region}b")

    @property
    def is_remote_backend(self) -> bool:
        return self.backend_mode == "remote"

    def tags(self, name: Optional[str] = None) -> List[Dict[str, str]]:
        """CloudFormation Tags list shared by every taggable resource."""
        tags = [{"Key": "Name", "Value": name}] if name else []
        tags.extend(
            [
                {"Key": "Project", "Value": self.project},
                {"Key": "Environment", "Value": self.environment},
                {"Key": "ManagedBy", "Value": "CDK"},
            ]
        )
        return tags

    @classmethod
    def from_environment(cls) -> "Configuration":
        """Resolve a Configuration from the current process environment."""
        return resolve_configuration(os.environ)


def default_image_uri(account_id: str, region: str, project: str, environment: str) -> str:
    """Build the ECR image reference used when IMAGE_URI is not given."""
    return f"{account_id}.dkr.ecr.{region}.amazonaws.com/{project}-{environment}:latest"


def resolve_configuration(environ: Optional[Mapping[str, str]] = None) -> Configuration:
    """
    Resolve raw environment input into a Configuration.

    Args:
        environ: Mapping of variable names to string values. Missing keys and
            empty strings fall back to the documented defaults.

    Returns:
        Configuration: The resolved, immutable configuration

    Raises:
        ConfigurationError: If a value cannot be parsed, or if the remote
            backend is selected without its state bucket and lock table
    """
    raw = {key: value.strip() for key, value in (environ or {}).items() if value is not None}

    def get(name: str) -> Optional[str]:
        value = raw.get(name)
        return value if value else None

    region = get("AWS_REGION") or DEFAULT_REGION
    project = get("PROJECT_NAME") or DEFAULT_PROJECT
    environment = get("ENVIRONMENT") or DEFAULT_ENVIRONMENT
    account_id = get("AWS_ACCOUNT_ID") or DEFAULT_ACCOUNT_ID

    backend_mode = (get("TF_BACKEND") or DEFAULT_BACKEND_MODE).lower()
    if backend_mode not in BACKEND_MODES:
        raise ConfigurationError(
            f"TF_BACKEND must be one of {', '.join(BACKEND_MODES)}, got '{backend_mode}'",
            ["TF_BACKEND"],
        )

    state_bucket = get("TF_STATE_BUCKET")
    lock_table = get("TF_LOCK_TABLE")
    if backend_mode == "remote":
        missing = [
            name
            for name, value in (("TF_STATE_BUCKET", state_bucket), ("TF_LOCK_TABLE", lock_table))
            if value is None
        ]
        if missing:
            raise ConfigurationError(
                f"TF_BACKEND=remote requires {' and '.join(missing)} to be set",
                missing,
            )

    return Configuration(
        region=region,
        project=project,
        environment=environment,
        account_id=account_id,
        image_uri=get("IMAGE_URI") or default_image_uri(account_id, region, project, environment),
        container_port=_parse_port(get("CONTAINER_PORT")),
        backend_mode=backend_mode,
        state_bucket=state_bucket,
        lock_table=lock_table,
        state_key=get("TF_STATE_KEY") or f"{project}/{environment}/terraform.tfstate",
        profile=get("AWS_PROFILE"),
        alerts_enabled=_parse_flag("ALERTS_ENABLED", get("ALERTS_ENABLED"), default=False),
        alert_email=get("ALERT_EMAIL"),
        registry_enabled=_parse_flag(
            "ECR_REPOSITORY_ENABLED", get("ECR_REPOSITORY_ENABLED"), default=True
        ),
    )


def _parse_port(value: Optional[str]) -> int:
    if value is None:
        return DEFAULT_CONTAINER_PORT
    try:
        port = int(value)
    except ValueError:
        raise ConfigurationError(
            f"CONTAINER_PORT must be an integer, got '{value}'", ["CONTAINER_PORT"]
        ) from None
    if not 1 <= port <= 65535:
        raise ConfigurationError(
            f"CONTAINER_PORT must be between 1 and 65535, got {port}", ["CONTAINER_PORT"]
        )
    return port


def _parse_flag(name: str, value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got '{value}'", [name])
