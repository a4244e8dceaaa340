"""
Named outputs exposed to deployment scripts and health checks.
"""

from typing import Optional, Tuple

from .graph import ConditionalSubgraph, Join, OutputBinding, ResourceDeclaration, ResourceGraph
from .load_balancing import HEALTH_CHECK_PATH
from .registry import REPOSITORY

ALB_DNS_NAME = "alb_dns_name"
HEALTH_URL = "health_url"
ECS_SERVICE_NAME = "ecs_service_name"
ECR_REPOSITORY_URL = "ecr_repository_url"


def emit_outputs(
    graph: ResourceGraph,
    load_balancer: ResourceDeclaration,
    service: ResourceDeclaration,
    registry: Optional[ConditionalSubgraph] = None,
) -> Tuple[OutputBinding, ...]:
    """
    Bind the named outputs on a sealed graph.

    Outputs are read-only projections of declared attributes; no resource is
    added here. The repository URL is only emitted when the registry subgraph
    was declared.
    """
    dns_name = load_balancer.ref("DNSName")
    outputs = [
        graph.bind_output(
            ALB_DNS_NAME, dns_name, "DNS name of the Application Load Balancer"
        ),
        graph.bind_output(
            HEALTH_URL,
            Join(("http://", dns_name, HEALTH_CHECK_PATH)),
            "Health check URL of the deployed service",
        ),
        graph.bind_output(
            ECS_SERVICE_NAME, service.ref("Name"), "Name of the ECS service"
        ),
    ]

    repository = registry.get(REPOSITORY) if registry else None
    if repository is not None:
        outputs.append(
            graph.bind_output(
                ECR_REPOSITORY_URL,
                repository.ref("RepositoryUri"),
                "URI of the ECR repository",
            )
        )

    return tuple(outputs)
