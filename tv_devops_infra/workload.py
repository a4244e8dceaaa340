"""
ECS on Fargate: cluster, log group, execution role, task definition, service.
"""

from dataclasses import dataclass
from typing import List, Sequence

from .config import Configuration
from .graph import ResourceDeclaration

CONTAINER_NAME = "app"
TASK_CPU = "256"
TASK_MEMORY = "512"
LOG_RETENTION_DAYS = 7
LOG_STREAM_PREFIX = "ecs"
DESIRED_COUNT = 1
EXECUTION_POLICY_ARN = "arn:aws:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy"


@dataclass(frozen=True)
class WorkloadResources:
    cluster: ResourceDeclaration
    log_group: ResourceDeclaration
    execution_role: ResourceDeclaration
    task_definition: ResourceDeclaration
    service: ResourceDeclaration

    @property
    def declarations(self) -> List[ResourceDeclaration]:
        return [
            self.cluster,
            self.log_group,
            self.execution_role,
            self.task_definition,
            self.service,
        ]


def build_workload(
    config: Configuration,
    subnets: Sequence[ResourceDeclaration],
    task_security_group: ResourceDeclaration,
    target_group: ResourceDeclaration,
    listener: ResourceDeclaration,
) -> WorkloadResources:
    """
    Declare the Fargate service and everything it needs to run.

    Args:
        config: Resolved configuration for this run
        subnets: Public subnets the tasks are placed in
        task_security_group: Security group admitting load balancer traffic
        target_group: Target group the service registers its tasks with
        listener: Listener attaching the target group to the load balancer

    Returns:
        WorkloadResources: Cluster, log group, role, task definition, service
    """
    cluster = ResourceDeclaration(
        name="Cluster",
        type="AWS::ECS::Cluster",
        properties={
            "ClusterName": f"{config.prefix}-cluster",
            "Tags": config.tags(f"{config.prefix}-cluster"),
        },
    )

    log_group = ResourceDeclaration(
        name="LogGroup",
        type="AWS::Logs::LogGroup",
        properties={
            "LogGroupName": f"/ecs/{config.prefix}",
            "RetentionInDays": LOG_RETENTION_DAYS,
            "Tags": config.tags(),
        },
    )

    # Task execution role (used by ECS to pull images and write logs)
    execution_role = ResourceDeclaration(
        name="ExecutionRole",
        type="AWS::IAM::Role",
        properties={
            "RoleName": f"{config.prefix}-ecs-exec-role",
            "AssumeRolePolicyDocument": {
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Effect": "Allow",
                        "Principal": {"Service": "ecs-tasks.amazonaws.com"},
                        "Action": "sts:AssumeRole",
                    }
                ],
            },
            "ManagedPolicyArns": [EXECUTION_POLICY_ARN],
            "Tags": config.tags(),
        },
    )

    task_definition = ResourceDeclaration(
        name="TaskDefinition",
        type="AWS::ECS::TaskDefinition",
        properties={
            "Family": config.prefix,
            "Cpu": TASK_CPU,
            "Memory": TASK_MEMORY,
            "NetworkMode": "awsvpc",
            "RequiresCompatibilities": ["FARGATE"],
            "ExecutionRoleArn": execution_role.ref("Arn"),
            "ContainerDefinitions": [
                {
                    "Name": CONTAINER_NAME,
                    "Image": config.image_uri,
                    "Essential": True,
                    "PortMappings": [
                        {"ContainerPort": config.container_port, "Protocol": "tcp"}
                    ],
                    "Environment": [
                        {"Name": "PORT", "Value": str(config.container_port)}
                    ],
                    "LogConfiguration": {
                        "LogDriver": "awslogs",
                        "Options": {
                            "awslogs-group": log_group.ref(),
                            "awslogs-region": config.region,
                            "awslogs-stream-prefix": LOG_STREAM_PREFIX,
                        },
                    },
                }
            ],
            "Tags": config.tags(),
        },
    )

    # The target group must be attached to the load balancer before ECS can
    # register tasks with it, even though no attribute of the listener is used
    service = ResourceDeclaration(
        name="Service",
        type="AWS::ECS::Service",
        properties={
            "ServiceName": f"{config.prefix}-service",
            "Cluster": cluster.ref("Arn"),
            "TaskDefinition": task_definition.ref(),
            "DesiredCount": DESIRED_COUNT,
            "LaunchType": "FARGATE",
            "NetworkConfiguration": {
                "AwsvpcConfiguration": {
                    "Subnets": [subnet.ref() for subnet in subnets],
                    "SecurityGroups": [task_security_group.ref("GroupId")],
                    "AssignPublicIp": "ENABLED",
                }
            },
            "LoadBalancers": [
                {
                    "TargetGroupArn": target_group.ref(),
                    "ContainerName": CONTAINER_NAME,
                    "ContainerPort": config.container_port,
                }
            ],
            "Tags": config.tags(),
        },
        depends_on=(target_group.name, listener.name),
    )

    return WorkloadResources(
        cluster=cluster,
        log_group=log_group,
        execution_role=execution_role,
        task_definition=task_definition,
        service=service,
    )
