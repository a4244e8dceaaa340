"""
Unit tests for the optional alerting subgraph.
"""

from tv_devops_infra import Ref, resolve_configuration, synthesize
from tv_devops_infra.observability import build_alerting

ALERT_TYPES = ("AWS::SNS::Topic", "AWS::SNS::Subscription", "AWS::CloudWatch::Alarm")


def _types(graph):
    return {declaration.type for declaration in graph}


class TestAlertingGate:
    def test_disabled_declares_nothing(self):
        graph = synthesize(resolve_configuration({"ALERT_EMAIL": "ops@example.com"})).graph

        assert not _types(graph) & set(ALERT_TYPES)

    def test_builder_returns_none_when_disabled(self, config):
        assert build_alerting(config, None, None) is None

    def test_enabled_without_recipient_skips_subscription(self):
        graph = synthesize(resolve_configuration({"ALERTS_ENABLED": "true"})).graph

        assert len(graph.of_type("AWS::SNS::Topic")) == 1
        assert len(graph.of_type("AWS::CloudWatch::Alarm")) == 1
        assert graph.of_type("AWS::SNS::Subscription") == []

    def test_enabled_with_recipient_subscribes_it(self):
        graph = synthesize(
            resolve_configuration({"ALERTS_ENABLED": "true", "ALERT_EMAIL": "ops@example.com"})
        ).graph

        (subscription,) = graph.of_type("AWS::SNS::Subscription")
        assert subscription.properties == {
            "TopicArn": Ref("AlertTopic"),
            "Protocol": "email",
            "Endpoint": "ops@example.com",
        }
        assert len(graph.of_type("AWS::SNS::Topic")) == 1
        assert len(graph.of_type("AWS::CloudWatch::Alarm")) == 1


class TestUnhealthyHostAlarm:
    def test_alarm_definition(self):
        graph = synthesize(resolve_configuration({"ALERTS_ENABLED": "yes"})).graph
        alarm = graph.get("UnhealthyHostAlarm").properties

        assert alarm["Namespace"] == "AWS/ApplicationELB"
        assert alarm["MetricName"] == "UnHealthyHostCount"
        assert alarm["Dimensions"] == [
            {"Name": "LoadBalancer", "Value": Ref("LoadBalancer", "LoadBalancerFullName")},
            {"Name": "TargetGroup", "Value": Ref("TargetGroup", "TargetGroupFullName")},
        ]
        assert alarm["Period"] == 60
        assert alarm["EvaluationPeriods"] == 1
        assert alarm["Threshold"] == 1
        assert alarm["ComparisonOperator"] == "GreaterThanOrEqualToThreshold"
        assert alarm["AlarmActions"] == [Ref("AlertTopic")]
        assert alarm["OKActions"] == [Ref("AlertTopic")]

    def test_topic_is_scoped_to_the_deployment(self):
        graph = synthesize(
            resolve_configuration({"ALERTS_ENABLED": "true", "ENVIRONMENT": "prod"})
        ).graph
        assert graph.get("AlertTopic").properties["TopicName"] == "tv-devops-prod-alerts"
