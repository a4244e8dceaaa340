"""
Remote state backend settings.

The backend is configuration for the provisioning engine, not a cloud
resource: the bucket and lock table already exist and are never declared
here. In local mode there is no backend section at all.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .config import Configuration


@dataclass(frozen=True)
class StateBackend:
    bucket: str
    key: str
    region: str
    lock_table: str
    profile: Optional[str] = None
    encrypt: bool = True

    def to_metadata(self) -> Dict[str, object]:
        """CloudFormation metadata block describing the backend."""
        metadata = {
            "Type": "s3",
            "Bucket": self.bucket,
            "Key": self.key,
            "Region": self.region,
            "DynamoDBTable": self.lock_table,
            "Encrypt": self.encrypt,
        }
        if self.profile:
            metadata["Profile"] = self.profile
        return metadata


def build_state_backend(config: Configuration) -> Optional[StateBackend]:
    """Return the remote backend settings, or None for the local backend."""
    if not config.is_remote_backend:
        return None
    # resolve_configuration guarantees both values in remote mode
    return StateBackend(
        bucket=config.state_bucket,
        key=config.state_key,
        region=config.region,
        lock_table=config.lock_table,
        profile=config.profile,
    )
