"""
ECR repository holding the service image.
"""

from typing import Optional

from .config import Configuration
from .graph import ConditionalSubgraph, ResourceDeclaration

REPOSITORY = "Repository"


def build_registry(config: Configuration) -> Optional[ConditionalSubgraph]:
    """Declare the image repository, or return None when it is managed elsewhere."""
    if not config.registry_enabled:
        return None

    repository = ResourceDeclaration(
        name=REPOSITORY,
        type="AWS::ECR::Repository",
        properties={
            "RepositoryName": config.prefix,
            "ImageTagMutability": "MUTABLE",
            "EmptyOnDelete": True,
            "Tags": config.tags(),
        },
    )
    return ConditionalSubgraph(name="registry", declarations=(repository,))
