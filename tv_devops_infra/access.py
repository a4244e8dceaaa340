"""
Security groups for the load balancer and the Fargate tasks.
"""

from dataclasses import dataclass
from typing import List

from .config import Configuration
from .graph import ResourceDeclaration
from .network import ANY_IPV4

PUBLIC_PORT = 80

_ALLOW_ALL_EGRESS = [{"IpProtocol": "-1", "FromPort": 0, "ToPort": 0, "CidrIp": ANY_IPV4}]


@dataclass(frozen=True)
class AccessControlResources:
    alb_security_group: ResourceDeclaration
    task_security_group: ResourceDeclaration

    @property
    def declarations(self) -> List[ResourceDeclaration]:
        return [self.alb_security_group, self.task_security_group]


def build_access_control(config: Configuration, vpc: ResourceDeclaration) -> AccessControlResources:
    """
    Declare the two security groups.

    The task group admits the container port only from the load balancer's
    security group. Its ingress source is always a group reference, never a
    CIDR range.
    """
    alb_security_group = ResourceDeclaration(
        name="AlbSecurityGroup",
        type="AWS::EC2::SecurityGroup",
        properties={
            "GroupName": f"{config.prefix}-alb-sg",
            "GroupDescription": f"Public HTTP access to the {config.prefix} load balancer",
            "VpcId": vpc.ref(),
            "SecurityGroupIngress": [
                {
                    "IpProtocol": "tcp",
                    "FromPort": PUBLIC_PORT,
                    "ToPort": PUBLIC_PORT,
                    "CidrIp": ANY_IPV4,
                }
            ],
            "SecurityGroupEgress": list(_ALLOW_ALL_EGRESS),
            "Tags": config.tags(f"{config.prefix}-alb-sg"),
        },
    )

    task_security_group = ResourceDeclaration(
        name="TaskSecurityGroup",
        type="AWS::EC2::SecurityGroup",
        properties={
            "GroupName": f"{config.prefix}-task-sg",
            "GroupDescription": f"Load balancer access to {config.prefix} tasks",
            "VpcId": vpc.ref(),
            "SecurityGroupIngress": [
                {
                    "IpProtocol": "tcp",
                    "FromPort": config.container_port,
                    "ToPort": config.container_port,
                    "SourceSecurityGroupId": alb_security_group.ref("GroupId"),
                }
            ],
            "SecurityGroupEgress": list(_ALLOW_ALL_EGRESS),
            "Tags": config.tags(f"{config.prefix}-task-sg"),
        },
    )

    return AccessControlResources(
        alb_security_group=alb_security_group,
        task_security_group=task_security_group,
    )
