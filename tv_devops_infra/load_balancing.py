"""
Application Load Balancer, target group and HTTP listener.

The health check contract is the same in every environment: the service must
answer ``GET /health`` with status 200.
"""

from dataclasses import dataclass
from typing import List, Sequence

from .access import PUBLIC_PORT
from .config import Configuration
from .graph import ResourceDeclaration

HEALTH_CHECK_PATH = "/health"
HEALTHY_STATUS_CODE = "200"


@dataclass(frozen=True)
class LoadBalancingResources:
    load_balancer: ResourceDeclaration
    target_group: ResourceDeclaration
    listener: ResourceDeclaration

    @property
    def declarations(self) -> List[ResourceDeclaration]:
        return [self.load_balancer, self.target_group, self.listener]


def build_load_balancing(
    config: Configuration,
    vpc: ResourceDeclaration,
    subnets: Sequence[ResourceDeclaration],
    alb_security_group: ResourceDeclaration,
) -> LoadBalancingResources:
    """
    Declare the public load balancer and its forwarding chain.

    Args:
        config: Resolved configuration for this run
        vpc: VPC the target group lives in
        subnets: The two public subnets the load balancer spans
        alb_security_group: Security group admitting public HTTP traffic

    Returns:
        LoadBalancingResources: Load balancer, target group and listener
    """
    load_balancer = ResourceDeclaration(
        name="LoadBalancer",
        type="AWS::ElasticLoadBalancingV2::LoadBalancer",
        properties={
            "Name": f"{config.prefix}-alb",
            "Type": "application",
            "Scheme": "internet-facing",
            "SecurityGroups": [alb_security_group.ref("GroupId")],
            "Subnets": [subnet.ref() for subnet in subnets],
            "Tags": config.tags(f"{config.prefix}-alb"),
        },
    )

    target_group = ResourceDeclaration(
        name="TargetGroup",
        type="AWS::ElasticLoadBalancingV2::TargetGroup",
        properties={
            "Name": f"{config.prefix}-tg",
            "Port": config.container_port,
            "Protocol": "HTTP",
            "VpcId": vpc.ref(),
            "TargetType": "ip",
            "HealthCheckEnabled": True,
            "HealthCheckPath": HEALTH_CHECK_PATH,
            "HealthCheckProtocol": "HTTP",
            "Matcher": {"HttpCode": HEALTHY_STATUS_CODE},
            "Tags": config.tags(f"{config.prefix}-tg"),
        },
    )

    listener = ResourceDeclaration(
        name="Listener",
        type="AWS::ElasticLoadBalancingV2::Listener",
        properties={
            "LoadBalancerArn": load_balancer.ref(),
            "Port": PUBLIC_PORT,
            "Protocol": "HTTP",
            "DefaultActions": [
                {
                    "Type": "forward",
                    "TargetGroupArn": target_group.ref(),
                }
            ],
        },
    )

    return LoadBalancingResources(
        load_balancer=load_balancer,
        target_group=target_group,
        listener=listener,
    )
