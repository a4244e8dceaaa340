"""
Optional alerting on unhealthy load balancer targets.

When alerts are enabled an SNS topic and a CloudWatch alarm are declared.
The e-mail subscription is only added when a recipient is configured; an
alarm without subscribers is a valid setup and not an error.
"""

from typing import Optional

from .config import Configuration
from .graph import ConditionalSubgraph, ResourceDeclaration

ALERT_TOPIC = "AlertTopic"
ALERT_SUBSCRIPTION = "AlertSubscription"
UNHEALTHY_HOST_ALARM = "UnhealthyHostAlarm"

ALARM_PERIOD_SECONDS = 60
ALARM_EVALUATION_PERIODS = 1
ALARM_THRESHOLD = 1


def build_alerting(
    config: Configuration,
    load_balancer: ResourceDeclaration,
    target_group: ResourceDeclaration,
) -> Optional[ConditionalSubgraph]:
    """
    Declare the alerting subgraph.

    Args:
        config: Resolved configuration for this run
        load_balancer: Load balancer whose targets are watched
        target_group: Target group whose unhealthy host count is watched

    Returns:
        Optional[ConditionalSubgraph]: Topic, optional subscription and alarm,
        or None when alerts are disabled
    """
    if not config.alerts_enabled:
        return None

    topic = ResourceDeclaration(
        name=ALERT_TOPIC,
        type="AWS::SNS::Topic",
        properties={
            "TopicName": f"{config.prefix}-alerts",
            "DisplayName": f"{config.prefix} alerts",
            "Tags": config.tags(),
        },
    )
    declarations = [topic]

    if config.alert_email:
        declarations.append(
            ResourceDeclaration(
                name=ALERT_SUBSCRIPTION,
                type="AWS::SNS::Subscription",
                properties={
                    "TopicArn": topic.ref(),
                    "Protocol": "email",
                    "Endpoint": config.alert_email,
                },
            )
        )

    declarations.append(
        ResourceDeclaration(
            name=UNHEALTHY_HOST_ALARM,
            type="AWS::CloudWatch::Alarm",
            properties={
                "AlarmName": f"{config.prefix}-unhealthy-hosts",
                "AlarmDescription": f"Unhealthy targets behind the {config.prefix} load balancer",
                "Namespace": "AWS/ApplicationELB",
                "MetricName": "UnHealthyHostCount",
                "Dimensions": [
                    {"Name": "LoadBalancer", "Value": load_balancer.ref("LoadBalancerFullName")},
                    {"Name": "TargetGroup", "Value": target_group.ref("TargetGroupFullName")},
                ],
                "Statistic": "Maximum",
                "Period": ALARM_PERIOD_SECONDS,
                "EvaluationPeriods": ALARM_EVALUATION_PERIODS,
                "Threshold": ALARM_THRESHOLD,
                "ComparisonOperator": "GreaterThanOrEqualToThreshold",
                "TreatMissingData": "notBreaching",
                "AlarmActions": [topic.ref()],
                "OKActions": [topic.ref()],
                "Tags": config.tags(),
            },
        )
    )

    return ConditionalSubgraph(name="alerting", declarations=tuple(declarations))
