"""
End-to-end tests for a synthesis run.
"""

import pytest

from tv_devops_infra import (
    ConfigurationError,
    ResourceGraph,
    resolve_configuration,
    synthesize,
    synthesize_from_environment,
)
from tv_devops_infra.backend import StateBackend


class TestSynthesis:
    def test_staging_scenario(self):
        result = synthesize_from_environment({"ENVIRONMENT": "staging", "CONTAINER_PORT": "8080"})
        graph = result.graph

        assert result.config.container_port == 8080
        assert "staging" in result.config.image_uri
        assert graph.get("TargetGroup").properties["Port"] == 8080
        (container,) = graph.get("TaskDefinition").properties["ContainerDefinitions"]
        assert container["Environment"] == [{"Name": "PORT", "Value": "8080"}]
        assert graph.get("Service").properties["ServiceName"] == "tv-devops-staging-service"
        assert result.stack_name == "tv-devops-staging"

    def test_remote_backend_without_bucket_fails_before_any_declaration(self, monkeypatch):
        created = []
        original_add = ResourceGraph.add

        def tracking_add(self, declaration):
            created.append(declaration.name)
            return original_add(self, declaration)

        monkeypatch.setattr(ResourceGraph, "add", tracking_add)

        with pytest.raises(ConfigurationError):
            synthesize_from_environment({"TF_BACKEND": "remote"})
        assert created == []

    def test_graph_is_sealed_and_acyclic(self, synthesis):
        assert synthesis.graph.sealed
        order = synthesis.graph.topological_order()
        assert sorted(order) == sorted(synthesis.graph.names)

    def test_default_resource_inventory(self, synthesis):
        graph = synthesis.graph

        assert len(graph.of_type("AWS::EC2::VPC")) == 1
        assert len(graph.of_type("AWS::EC2::Subnet")) == 2
        assert len(graph.of_type("AWS::EC2::RouteTable")) == 1
        assert len(graph.of_type("AWS::EC2::SubnetRouteTableAssociation")) == 2
        assert len(graph.of_type("AWS::EC2::SecurityGroup")) == 2
        assert len(graph.of_type("AWS::ECR::Repository")) == 1
        assert len(graph.of_type("AWS::ECS::Service")) == 1
        assert graph.of_type("AWS::SNS::Topic") == []

    def test_each_run_builds_a_fresh_graph(self, config):
        first = synthesize(config)
        second = synthesize(config)

        assert first.graph is not second.graph
        assert first.graph.to_dict() == second.graph.to_dict()

    def test_registry_can_be_disabled(self):
        result = synthesize(resolve_configuration({"ECR_REPOSITORY_ENABLED": "off"}))
        assert result.graph.of_type("AWS::ECR::Repository") == []

    def test_local_backend_has_no_backend_section(self, synthesis):
        assert synthesis.backend is None

    def test_remote_backend_section(self):
        result = synthesize_from_environment(
            {
                "TF_BACKEND": "remote",
                "TF_STATE_BUCKET": "tv-devops-state",
                "TF_LOCK_TABLE": "tv-devops-locks",
                "AWS_PROFILE": "deploy",
            }
        )

        assert result.backend == StateBackend(
            bucket="tv-devops-state",
            key="tv-devops/dev/terraform.tfstate",
            region="us-west-2",
            lock_table="tv-devops-locks",
            profile="deploy",
        )
        # The backend is engine configuration, not a declared resource
        assert result.graph.of_type("AWS::S3::Bucket") == []
        assert result.graph.of_type("AWS::DynamoDB::Table") == []
